# all models imported here so SQLAlchemy registers them on Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.address import AddressModel
from storefront.data.models.payment_method import PaymentMethodModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "AddressModel",
    "PaymentMethodModel",
]
