from django.urls import path
from . import views

app_name = "sales"

urlpatterns = [
    path("line-items", views.stage_line_item, name="stage_line_item"),
    path("orders", views.orders, name="orders"),
    path("orders/<uuid:order_id>", views.download_order, name="download_order"),
]
