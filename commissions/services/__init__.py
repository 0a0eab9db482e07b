from .commission_service import CommissionCalculator, quantize_money
from .auth_service import AuthService, user_has_permission
from .dashboard_service import DashboardService, format_currency
from .email_service import EmailService
from .report_service import ReportService
from .sale_service import SaleService
from .seller_service import SellerService

__all__ = [
    'AuthService',
    'CommissionCalculator',
    'DashboardService',
    'EmailService',
    'ReportService',
    'SaleService',
    'SellerService',
    'format_currency',
    'quantize_money',
    'user_has_permission',
]
