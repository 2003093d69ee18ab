"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, as a new line or onto an existing one."""

    __version__ = 1

    session_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)
    cart_total = Float(required=True)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was set to a new value."""

    __version__ = 1

    session_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    cart_total = Float(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    session_id = Identifier(required=True)
    item_id = Identifier(required=True)
    cart_total = Float(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCheckedOut:
    """The cart was turned into a receipt and emptied."""

    __version__ = 1

    session_id = Identifier(required=True)
    order_id = String(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
