from django.urls import path
from . import views

app_name = "purchasing"

urlpatterns = [
    path("purchasings/<int:purchasing_id>/stocks/", views.StockLineListView.as_view(), name="stock-list"),
    path("purchasings/<int:purchasing_id>/stocks/recompute/", views.StockLineRecomputeView.as_view(), name="stock-recompute"),
    path("purchasings/<int:purchasing_id>/stocks/<int:stock_id>/", views.StockLineDetailView.as_view(), name="stock-detail"),
    path("purchasings/<int:purchasing_id>/stocks/<int:stock_id>/init-stock/", views.StockLineInitStockView.as_view(), name="stock-init-stock"),

    path("products/search/", views.ProductSearchView.as_view(), name="product-search"),
]
