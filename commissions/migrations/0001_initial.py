from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Seller',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('email', models.EmailField(max_length=255, unique=True, verbose_name='Email')),
            ],
            options={
                'verbose_name': 'Seller',
                'verbose_name_plural': 'Sellers',
                'db_table': 'commissions_seller',
                'ordering': ['-id'],
                'permissions': [
                    ('view_sellers', 'Can view sellers'),
                    ('create_sellers', 'Can create sellers'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='Amount')),
                ('commission_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, verbose_name='Commission Amount')),
                ('sold_at', models.DateTimeField(db_index=True, verbose_name='Sold At')),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sales', to='commissions.seller', verbose_name='Seller')),
            ],
            options={
                'verbose_name': 'Sale',
                'verbose_name_plural': 'Sales',
                'db_table': 'commissions_sale',
                'ordering': ['-id'],
                'permissions': [
                    ('view_sales', 'Can view sales'),
                    ('create_sales', 'Can create sales'),
                    ('manage_admin_functions', 'Can manage admin functions'),
                    ('resend_commissions', 'Can resend commission emails'),
                    ('run_daily_mails', 'Can run the daily commission mails'),
                ],
                'indexes': [models.Index(fields=['seller', 'sold_at'], name='sale_seller_sold_at_idx')],
            },
        ),
        migrations.CreateModel(
            name='QueuedJob',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('queue', models.CharField(default='default', max_length=50, verbose_name='Queue')),
                ('job', models.CharField(max_length=100, verbose_name='Job')),
                ('payload', models.JSONField(blank=True, default=dict, verbose_name='Payload')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('running', 'Running'), ('completed', 'Completed'), ('failed', 'Failed'), ('discarded', 'Discarded')], default='pending', max_length=20, verbose_name='Status')),
                ('attempts', models.PositiveIntegerField(default=0, verbose_name='Attempts')),
                ('max_tries', models.PositiveIntegerField(default=1, verbose_name='Max Tries')),
                ('timeout', models.PositiveIntegerField(default=60, help_text='A running job older than this is considered abandoned', verbose_name='Timeout (seconds)')),
                ('available_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Available At')),
                ('reserved_at', models.DateTimeField(blank=True, null=True, verbose_name='Reserved At')),
                ('finished_at', models.DateTimeField(blank=True, null=True, verbose_name='Finished At')),
                ('unique_id', models.CharField(blank=True, db_index=True, max_length=255, verbose_name='Unique ID')),
                ('last_error', models.TextField(blank=True, verbose_name='Last Error')),
            ],
            options={
                'verbose_name': 'Queued Job',
                'verbose_name_plural': 'Queued Jobs',
                'db_table': 'commissions_queued_job',
                'ordering': ['available_at', 'id'],
                'indexes': [models.Index(fields=['queue', 'status', 'available_at'], name='queued_job_queue_status_idx')],
            },
        ),
    ]
