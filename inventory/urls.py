from django.urls import path

from .views import MovementListView, StockAdjustmentView

urlpatterns = [
    path("movements/", MovementListView.as_view(), name="movement-list"),
    path("adjustments/", StockAdjustmentView.as_view(), name="stock-adjustment"),
]
