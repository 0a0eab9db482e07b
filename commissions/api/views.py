from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from ..dto import CreateSaleData, CreateSellerData, LoginData
from ..services.auth_service import AuthService
from ..services.dashboard_service import DashboardService
from ..services.sale_service import SaleService
from ..services.seller_service import SellerService
from .permissions import HasRequiredPermission
from .responses import created_response, paginated_response, success_response
from .serializers import (
    DateFilterSerializer,
    LoginSerializer,
    PaginationSerializer,
    SaleCreateSerializer,
    SaleSerializer,
    SellerCreateSerializer,
    SellerSerializer,
)


class CommissionsAPIView(APIView):
    """Base view: authenticated user plus the per-method permission map."""
    permission_classes = [IsAuthenticated, HasRequiredPermission]
    required_permissions = {}

    def get_pagination(self, request):
        serializer = PaginationSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data["per_page"], serializer.validated_data["page"]

    def get_date(self, data):
        serializer = DateFilterSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data.get("date")


# ============================================================
# AUTH VIEWS
# ============================================================

class LoginView(APIView):
    """Exchange email and password for a bearer token."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = AuthService().login(LoginData.from_dict(serializer.validated_data))
        return success_response(result, "Login successful")


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return success_response(AuthService().user(request.user), "User retrieved successfully")


class LogoutView(APIView):
    """Revoke the token used for this request."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        AuthService().logout(request.auth)
        return success_response(message="Logout successful")


# ============================================================
# DASHBOARD VIEWS
# ============================================================

class DashboardStatsView(CommissionsAPIView):

    def get(self, request):
        return success_response(DashboardService().all_stats(), "Dashboard stats retrieved successfully")


# ============================================================
# SELLER VIEWS
# ============================================================

class SellerListCreateView(CommissionsAPIView):
    required_permissions = {"GET": "view_sellers", "POST": "create_sellers"}

    def get(self, request):
        per_page, page = self.get_pagination(request)
        result = SellerService().find_all(per_page, page)
        data = SellerSerializer(result.items, many=True).data
        return paginated_response(request, result, data, "Sellers retrieved successfully")

    def post(self, request):
        serializer = SellerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        seller = SellerService().create(CreateSellerData.from_dict(serializer.validated_data))
        return created_response(SellerSerializer(seller).data, "Seller created successfully")


class SellerResendCommissionView(CommissionsAPIView):
    required_permissions = {"POST": "resend_commissions"}

    def post(self, request, seller_id):
        day = self.get_date(request.data)
        result = SellerService().resend_commission(seller_id, day)
        return success_response(result, "Commission email resent successfully")


class RunDailyMailsView(CommissionsAPIView):
    required_permissions = {"POST": "run_daily_mails"}

    def post(self, request):
        day = self.get_date(request.data)
        result = SellerService().run_daily_mails(day)
        return success_response(result, "Daily mails queued successfully")


# ============================================================
# SALE VIEWS
# ============================================================

class SaleListCreateView(CommissionsAPIView):
    required_permissions = {"GET": "view_sales", "POST": "create_sales"}

    def get(self, request):
        per_page, page = self.get_pagination(request)
        result = SaleService().find_all(per_page, page)
        data = SaleSerializer(result.items, many=True).data
        return paginated_response(request, result, data, "Sales retrieved successfully")

    def post(self, request):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sale = SaleService().create(CreateSaleData.from_dict(serializer.validated_data))
        return created_response(SaleSerializer(sale).data, "Sale created successfully")


class SellerSalesView(CommissionsAPIView):
    required_permissions = {"GET": "view_sales"}

    def get(self, request, seller_id):
        per_page, page = self.get_pagination(request)
        day = self.get_date(request.query_params)
        result = SaleService().find_all_by_seller(seller_id, day, per_page, page)
        data = SaleSerializer(result.items, many=True).data
        return paginated_response(request, result, data, "Seller sales retrieved successfully")


class SaleResendCommissionView(CommissionsAPIView):
    required_permissions = {"POST": "resend_commissions"}

    def post(self, request, sale_id):
        SaleService().resend_sale_commission(sale_id)
        return success_response(message="Sale commission email resent successfully")
