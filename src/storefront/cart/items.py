"""Cart item management: commands and handler.

Dispatch these through ``storefront.cart.session.process_for_session`` so that
mutations of one session's cart never interleave.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.catalog import get_product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    session_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    session_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    session_id = Identifier(required=True)
    item_id = Identifier(required=True)


def _existing_cart(repo, session_id) -> ShoppingCart:
    try:
        return repo.get(session_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": f"Cart for session {session_id} not found"}) from None


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = get_product(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        try:
            cart = repo.get(command.session_id)
        except ObjectNotFoundError:
            # First mutation for this session creates the cart
            cart = ShoppingCart.create(command.session_id)

        item = cart.add_item(product, command.quantity)
        repo.add(cart)

        logger.info(
            "Item added to cart",
            session_id=str(command.session_id),
            product_id=str(command.product_id),
            quantity=command.quantity,
            line_quantity=item.quantity,
            cart_total=cart.total,
        )
        return cart

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(repo, command.session_id)
        cart.update_item_quantity(command.item_id, command.quantity)
        repo.add(cart)
        return cart

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(repo, command.session_id)
        cart.remove_item(command.item_id)
        repo.add(cart)
        return cart
