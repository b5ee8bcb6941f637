import logging

from django.shortcuts import render, redirect
from django.http import Http404
from django.views.decorators.http import require_POST
from django.contrib import messages
from django.contrib.auth.decorators import login_required, user_passes_test
from bson import ObjectId

from .models import Product, Order, Review
from .forms import ProductForm, OrderForm, ReviewForm, LoginForm, SignupForm, ProfileForm, OrderStatusForm
from .exceptions import BACKEND_ERRORS, AuthError, InsufficientStock, OrderPlacementError, ShopError
from .accounts import sign_in, sign_up, sign_out, is_admin, update_profile
from .catalog import (
    load_products, search_products, categories, featured_products,
    save_product, delete_product, toggle_featured,
)
from .dashboard import (
    load_orders, visible_orders, dashboard_stats, set_order_status,
    load_customers, customers_with_order_counts,
)
from .inventory import place_order
from .utils import delivery_fee

logger = logging.getLogger(__name__)


def _get_document_or_404(document, doc_id):
    if not ObjectId.is_valid(doc_id):
        raise Http404()
    obj = document.objects(id=doc_id).first()
    if not obj:
        raise Http404()
    return obj


def _load_products_or_notify(request):
    try:
        return load_products()
    except BACKEND_ERRORS:
        logger.exception('Loading products failed')
        messages.error(request, 'Failed to load products')
        return []


def home(request):
    products = _load_products_or_notify(request)
    return render(request, 'shop/home.html', {'featured': featured_products(products)})


def about(request):
    return render(request, 'shop/about.html')


def catalog(request):
    query = request.GET.get('q', '')
    products = _load_products_or_notify(request)
    return render(request, 'shop/catalog.html', {
        'products': search_products(products, query),
        'query': query,
    })


def order_product(request, product_id):
    product = _get_document_or_404(Product, product_id)
    if request.method == 'POST':
        form = OrderForm(request.POST)
        if form.is_valid():
            data = dict(form.cleaned_data)
            quantity = data.pop('quantity')
            try:
                place_order(product, quantity, data)
            except InsufficientStock as exc:
                messages.error(request, str(exc))
            except BACKEND_ERRORS + (OrderPlacementError,):
                logger.exception('Placing order for product %s failed', product_id)
                messages.error(request, 'Failed to place order. Please try again.')
            except ShopError as exc:
                messages.error(request, str(exc))
            else:
                messages.success(request, 'Order placed successfully!')
                return redirect('catalog')
    else:
        form = OrderForm()
    return render(request, 'shop/order_form.html', {
        'form': form,
        'product': product,
        'delivery_fee': delivery_fee(),
    })


def submit_review(request):
    if request.method == 'POST':
        form = ReviewForm(request.POST)
        if form.is_valid():
            try:
                Review(
                    rating=form.cleaned_data['rating'],
                    comment=form.cleaned_data['comment'],
                    name=form.cleaned_data['name'],
                    email=form.cleaned_data.get('email', ''),
                ).save()
            except BACKEND_ERRORS:
                logger.exception('Saving review failed')
                messages.error(request, 'Something went wrong')
            else:
                messages.success(request, 'Review submitted successfully')
                return redirect('home')
        else:
            messages.error(request, 'Please fill required fields')
    else:
        form = ReviewForm()
    return render(request, 'shop/review_form.html', {'form': form})


# Accounts
def login_view(request):
    if request.method == 'POST':
        form = LoginForm(request.POST)
        if form.is_valid():
            try:
                user = sign_in(request, form.cleaned_data['email'], form.cleaned_data['password'])
            except AuthError as exc:
                if exc.field:
                    form.add_error(exc.field, exc.message)
                else:
                    messages.error(request, exc.message)
            else:
                messages.success(request, 'Login Successful')
                if is_admin(user):
                    return redirect('admin_dashboard')
                return redirect('home')
    else:
        form = LoginForm()
    return render(request, 'registration/login.html', {'form': form})


def signup(request):
    if request.method == 'POST':
        form = SignupForm(request.POST)
        if form.is_valid():
            try:
                sign_up(request, form.cleaned_data['email'], form.cleaned_data['password'])
            except AuthError as exc:
                if exc.field:
                    form.add_error(exc.field, exc.message)
                else:
                    messages.error(request, exc.message)
            except BACKEND_ERRORS:
                logger.exception('Creating account profile failed')
                messages.error(request, 'Signup failed')
            else:
                messages.success(request, 'Account created successfully')
                return redirect('home')
    else:
        form = SignupForm()
    return render(request, 'registration/signup.html', {'form': form})


@require_POST
def logout_view(request):
    sign_out(request)
    return redirect('home')


@login_required
def profile(request):
    user = request.user
    if request.method == 'POST':
        form = ProfileForm(request.POST)
        if form.is_valid():
            try:
                update_profile(request, **form.cleaned_data)
            except AuthError as exc:
                if exc.field:
                    form.add_error(exc.field, exc.message)
                else:
                    messages.error(request, exc.message)
            except BACKEND_ERRORS:
                logger.exception('Updating profile for user %s failed', user.pk)
                messages.error(request, 'Failed to update profile')
            else:
                messages.success(request, 'Profile updated successfully!')
                return redirect('profile')
    else:
        form = ProfileForm(initial={'display_name': user.first_name, 'email': user.email})
    return render(request, 'shop/profile.html', {'form': form})


# Admin views
@login_required
@user_passes_test(is_admin)
def admin_dashboard(request):
    try:
        products = load_products()
        orders = load_orders()
        customers = load_customers()
    except BACKEND_ERRORS:
        logger.exception('Loading dashboard data failed')
        messages.error(request, 'Failed to load dashboard data')
        products, orders, customers = [], [], []
    return render(request, 'shop/admin/dashboard.html', {
        'stats': dashboard_stats(orders, products, total_customers=len(customers)),
        'recent_orders': visible_orders(orders, products)[:5],
    })


@login_required
@user_passes_test(is_admin)
def admin_products(request):
    query = request.GET.get('q', '')
    products = _load_products_or_notify(request)
    return render(request, 'shop/admin/products.html', {
        'products': search_products(products, query),
        'query': query,
        'total': len(products),
    })


def _product_form_page(request, product=None):
    if request.method == 'POST':
        form = ProductForm(request.POST)
        if form.is_valid():
            try:
                save_product(form.cleaned_data, product)
            except BACKEND_ERRORS:
                logger.exception('Saving product failed')
                messages.error(request, 'Failed to save product')
            else:
                messages.success(request, 'Product updated successfully!' if product else 'Product added successfully!')
                return redirect('admin_products')
    elif product is not None:
        form = ProductForm(initial={
            'name': product.name,
            'category': product.category,
            'price': product.price,
            'stock': product.stock,
            'description': product.description,
            'image': product.image,
            'featured': product.featured,
        })
    else:
        form = ProductForm()
    return render(request, 'shop/admin/product_form.html', {
        'form': form,
        'product': product,
        'categories': categories(_load_products_or_notify(request)),
    })


@login_required
@user_passes_test(is_admin)
def admin_add_product(request):
    return _product_form_page(request)


@login_required
@user_passes_test(is_admin)
def admin_edit_product(request, product_id):
    return _product_form_page(request, _get_document_or_404(Product, product_id))


@login_required
@user_passes_test(is_admin)
def admin_delete_product(request, product_id):
    product = _get_document_or_404(Product, product_id)
    if request.method == 'POST':
        try:
            delete_product(product)
        except BACKEND_ERRORS:
            logger.exception('Deleting product %s failed', product_id)
            messages.error(request, 'Failed to delete product')
        else:
            messages.success(request, 'Product deleted successfully!')
        return redirect('admin_products')
    return render(request, 'shop/admin/product_confirm_delete.html', {'product': product})


@login_required
@user_passes_test(is_admin)
@require_POST
def admin_toggle_featured(request, product_id):
    product = _get_document_or_404(Product, product_id)
    try:
        toggle_featured(product)
    except BACKEND_ERRORS:
        logger.exception('Updating product %s failed', product_id)
        messages.error(request, 'Failed to update product')
    else:
        messages.success(request, 'Product updated!')
    return redirect('admin_products')


@login_required
@user_passes_test(is_admin)
def admin_orders(request):
    try:
        products = load_products()
        orders = load_orders()
    except BACKEND_ERRORS:
        logger.exception('Loading orders failed')
        messages.error(request, 'Failed to load orders')
        products, orders = [], []
    images = {str(p.id): p.image for p in products}
    return render(request, 'shop/admin/orders.html', {
        'orders': [(o, images.get(o.product_id)) for o in visible_orders(orders, products)],
        'status_form': OrderStatusForm(),
    })


@login_required
@user_passes_test(is_admin)
@require_POST
def admin_update_order_status(request, order_id):
    order = _get_document_or_404(Order, order_id)
    form = OrderStatusForm(request.POST)
    if form.is_valid():
        try:
            set_order_status(order, form.cleaned_data['status'])
        except BACKEND_ERRORS:
            logger.exception('Updating order %s failed', order_id)
            messages.error(request, 'Failed to update order')
        else:
            messages.success(request, 'Order updated!')
    else:
        messages.error(request, 'Unknown order status')
    return redirect('admin_orders')


@login_required
@user_passes_test(is_admin)
def admin_customers(request):
    try:
        rows = customers_with_order_counts(load_customers(), load_orders())
    except BACKEND_ERRORS:
        logger.exception('Loading customers failed')
        messages.error(request, 'Failed to load customers')
        rows = []
    return render(request, 'shop/admin/customers.html', {'customers': rows})
