from django.http import JsonResponse
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator
import json

from purchasing.editor import StockLineEditor, StockLineInvalid
from purchasing.services import (
    ServiceError, ValidationError, NotFoundError, BusinessRuleError, PurchasingLockedError,
    PurchasingService, ProductService,
)


def error_response(message: str, code: str = "error", status: int = 400, details: dict = None):
    data = {"success": False, "error": {"code": code, "message": message}}
    if details:
        data["error"]["details"] = details
    return JsonResponse(data, status=status)


def handle_service_error(e: Exception):
    if isinstance(e, StockLineInvalid):
        return error_response(str(e), "validation_error", 400, {"fields": e.errors})
    elif isinstance(e, ValidationError):
        return error_response(str(e), "validation_error", 400, {"field": e.field})
    elif isinstance(e, NotFoundError):
        return error_response(str(e), "not_found", 404)
    elif isinstance(e, PurchasingLockedError):
        return error_response(str(e), "purchasing_locked", 403)
    elif isinstance(e, BusinessRuleError):
        return error_response(str(e), "business_rule", 400)
    raise e


class BasePurchasingView(View):
    @method_decorator(csrf_exempt)
    def dispatch(self, request, *args, **kwargs):
        if not (request.user.is_authenticated and request.user.is_staff):
            return error_response("Staff login required", "forbidden", 403)
        try:
            return super().dispatch(request, *args, **kwargs)
        except (ServiceError, StockLineInvalid) as e:
            return handle_service_error(e)

    def get_json_body(self, request):
        try:
            data = json.loads(request.body) if request.body else {}
        except json.JSONDecodeError:
            raise ValidationError("Request body must be valid JSON")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def get_editor(self, purchasing_id: int) -> StockLineEditor:
        return StockLineEditor(PurchasingService.get_or_404(purchasing_id))

    def success(self, data: dict, status: int = 200):
        return JsonResponse({"success": True, **data}, status=status)

    def mutation_success(self, editor: StockLineEditor, data: dict = None, status: int = 200):
        purchasing = editor.purchasing
        purchasing.refresh_from_db()
        return self.success({
            **(data or {}),
            "purchasing": PurchasingService.serialize_brief(purchasing),
            "refresh": editor.refresh_requested,
        }, status)


# ==================== STOCK LINES ====================

class StockLineListView(BasePurchasingView):

    def get(self, request, purchasing_id):
        editor = self.get_editor(purchasing_id)
        return self.success(editor.render())

    def post(self, request, purchasing_id):
        editor = self.get_editor(purchasing_id)
        stock = editor.create(self.get_json_body(request))
        return self.mutation_success(editor, {"stock": editor.serialize(stock)}, 201)


class StockLineRecomputeView(BasePurchasingView):

    def post(self, request, purchasing_id):
        editor = self.get_editor(purchasing_id)
        data = self.get_json_body(request)
        changed = data.get("changed")
        if not changed:
            raise ValidationError("Changed field is required", "changed")
        state = data.get("state") or {}
        if not isinstance(state, dict):
            raise ValidationError("State must be a JSON object", "state")
        patch = editor.on_field_change(state, changed)
        return self.success({"patch": {name: str(value) for name, value in patch.items()}})


class StockLineDetailView(BasePurchasingView):

    def put(self, request, purchasing_id, stock_id):
        editor = self.get_editor(purchasing_id)
        stock = editor.edit(editor.get_stock(stock_id), self.get_json_body(request))
        return self.mutation_success(editor, {"stock": editor.serialize(stock)})

    def delete(self, request, purchasing_id, stock_id):
        editor = self.get_editor(purchasing_id)
        editor.delete(editor.get_stock(stock_id))
        return self.mutation_success(editor, {"deleted": stock_id})


class StockLineInitStockView(BasePurchasingView):

    def patch(self, request, purchasing_id, stock_id):
        editor = self.get_editor(purchasing_id)
        data = self.get_json_body(request)
        stock = editor.update_init_stock(editor.get_stock(stock_id), data.get("init_stock"))
        return self.success({"stock": editor.serialize(stock)})


# ==================== PRODUCTS ====================

class ProductSearchView(BasePurchasingView):

    def get(self, request):
        products = ProductService.search(request.GET.get("q", ""))
        return self.success({
            "products": [ProductService.serialize_option(p) for p in products],
            "count": len(products),
        })
