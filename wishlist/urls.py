from django.urls import path

from .views import WishlistCheckView, WishlistItemView, WishlistView

app_name = "wishlist"

urlpatterns = [
    path("", WishlistView.as_view(), name="wishlist"),
    path("<int:item_id>/", WishlistItemView.as_view(), name="wishlist-item"),
    path("check/<int:product_id>/", WishlistCheckView.as_view(), name="wishlist-check"),
]
