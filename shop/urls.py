from django.urls import path
from . import views

urlpatterns = [
    path('', views.home, name='home'),
    path('about/', views.about, name='about'),
    path('shop/', views.catalog, name='catalog'),
    path('shop/order/<str:product_id>/', views.order_product, name='order_product'),
    path('reviews/', views.submit_review, name='submit_review'),
    path('accounts/login/', views.login_view, name='login'),
    path('accounts/signup/', views.signup, name='signup'),
    path('accounts/logout/', views.logout_view, name='logout'),
    path('profile/', views.profile, name='profile'),

    # Admin
    path('store-admin/dashboard/', views.admin_dashboard, name='admin_dashboard'),
    path('store-admin/products/', views.admin_products, name='admin_products'),
    path('store-admin/products/add/', views.admin_add_product, name='admin_add_product'),
    path('store-admin/products/<str:product_id>/edit/', views.admin_edit_product, name='admin_edit_product'),
    path('store-admin/products/<str:product_id>/delete/', views.admin_delete_product, name='admin_delete_product'),
    path('store-admin/products/<str:product_id>/feature/', views.admin_toggle_featured, name='admin_toggle_featured'),
    path('store-admin/orders/', views.admin_orders, name='admin_orders'),
    path('store-admin/orders/<str:order_id>/status/', views.admin_update_order_status, name='admin_update_order_status'),
    path('store-admin/customers/', views.admin_customers, name='admin_customers'),
]
