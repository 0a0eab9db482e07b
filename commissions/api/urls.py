from django.urls import path

from .views import (
    CurrentUserView,
    DashboardStatsView,
    LoginView,
    LogoutView,
    RunDailyMailsView,
    SaleListCreateView,
    SaleResendCommissionView,
    SellerListCreateView,
    SellerResendCommissionView,
    SellerSalesView,
)

app_name = "commissions"

urlpatterns = [
    # Auth
    path("auth/login", LoginView.as_view(), name="auth-login"),
    path("auth/user", CurrentUserView.as_view(), name="auth-user"),
    path("auth/logout", LogoutView.as_view(), name="auth-logout"),

    # Dashboard
    path("dashboard/stats", DashboardStatsView.as_view(), name="dashboard-stats"),

    # Sellers
    path("sellers", SellerListCreateView.as_view(), name="seller-list"),
    path("sellers/<int:seller_id>/sales", SellerSalesView.as_view(), name="seller-sales"),

    # Sales
    path("sales", SaleListCreateView.as_view(), name="sale-list"),

    # Admin
    path(
        "admin/sellers/<int:seller_id>/resend-commission",
        SellerResendCommissionView.as_view(),
        name="seller-resend-commission",
    ),
    path(
        "admin/sales/<int:sale_id>/resend-commission",
        SaleResendCommissionView.as_view(),
        name="sale-resend-commission",
    ),
    path("admin/run-daily-mails", RunDailyMailsView.as_view(), name="run-daily-mails"),
]
