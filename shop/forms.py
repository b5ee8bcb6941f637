from django import forms

from .models import ORDER_STATUSES
from .utils import coerce_price, coerce_stock

RATING_CHOICES = [(i, str(i)) for i in range(1, 6)]


class ProductForm(forms.Form):
    name = forms.CharField(max_length=200)
    category = forms.CharField(max_length=100, widget=forms.TextInput(attrs={'list': 'categories'}))
    # Free text; anything that is not a number is saved as 0
    price = forms.CharField(required=False)
    stock = forms.CharField(required=False)
    description = forms.CharField(widget=forms.Textarea, required=False)
    image = forms.CharField(max_length=500, required=False, help_text='Image URL')
    featured = forms.BooleanField(required=False)

    def clean_price(self):
        return coerce_price(self.cleaned_data.get('price'))

    def clean_stock(self):
        return coerce_stock(self.cleaned_data.get('stock'))


class OrderForm(forms.Form):
    customer_name = forms.CharField(max_length=200)
    customer_email = forms.EmailField()
    customer_phone = forms.CharField(max_length=30)
    shipping_address = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}))
    quantity = forms.IntegerField(min_value=1, initial=1)


class ReviewForm(forms.Form):
    rating = forms.TypedChoiceField(choices=RATING_CHOICES, coerce=int)
    comment = forms.CharField(widget=forms.Textarea(attrs={'rows': 4}))
    name = forms.CharField(max_length=100)
    email = forms.EmailField(required=False)


class LoginForm(forms.Form):
    email = forms.EmailField(error_messages={'invalid': 'Invalid email format', 'required': 'Email is required'})
    password = forms.CharField(widget=forms.PasswordInput, error_messages={'required': 'Password is required'})


class SignupForm(forms.Form):
    email = forms.EmailField(error_messages={'invalid': 'Invalid email format', 'required': 'Email is required'})
    password = forms.CharField(
        widget=forms.PasswordInput,
        min_length=6,
        error_messages={'min_length': 'Password must be at least 6 characters', 'required': 'Password is required'},
    )
    confirm_password = forms.CharField(widget=forms.PasswordInput, error_messages={'required': 'Confirm password is required'})

    def clean(self):
        cleaned = super().clean()
        if cleaned.get('password') and cleaned.get('confirm_password') != cleaned.get('password'):
            self.add_error('confirm_password', 'Passwords do not match')
        return cleaned


class ProfileForm(forms.Form):
    display_name = forms.CharField(max_length=150, required=False)
    email = forms.EmailField()
    current_password = forms.CharField(widget=forms.PasswordInput, required=False)
    new_password = forms.CharField(widget=forms.PasswordInput, required=False)
    confirm_password = forms.CharField(widget=forms.PasswordInput, required=False)


class OrderStatusForm(forms.Form):
    status = forms.ChoiceField(choices=[(s, s) for s in ORDER_STATUSES])
