from .models import Product


def load_products():
    return list(Product.objects().order_by('-created_at'))


def search_products(products, term):
    """Case-insensitive substring match on name, category or description."""
    term = (term or '').strip().lower()
    if not term:
        return list(products)
    return [
        p for p in products
        if term in (p.name or '').lower()
        or term in (p.category or '').lower()
        or term in (p.description or '').lower()
    ]


def categories(products):
    seen = []
    for p in products:
        if p.category and p.category not in seen:
            seen.append(p.category)
    return seen


def featured_products(products):
    return [p for p in products if p.featured]


def save_product(data, product=None):
    """Create a product, or overwrite ``product`` with the form data.

    Status is derived from stock when the document is validated on save.
    """
    if product is None:
        product = Product()
    product.name = data['name']
    product.category = data['category']
    product.price = data['price']
    product.stock = data['stock']
    product.description = data.get('description', '')
    product.image = data.get('image', '')
    product.featured = bool(data.get('featured', False))
    product.save()
    return product


def delete_product(product):
    product.delete()


def toggle_featured(product):
    featured = not product.featured
    product.update(set__featured=featured)
    product.featured = featured
    return product
