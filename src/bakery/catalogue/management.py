"""Product price management: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from bakery.catalogue.product_price import ProductPrice
from bakery.domain import bakery
from bakery.shared import clock, records
from bakery.utils.logging import get_logger

logger = get_logger(__name__)


@bakery.command(part_of="ProductPrice")
class RegisterProductPrice:
    product_id: Identifier(required=True)
    product_name: String(required=True, max_length=255)
    size: String(max_length=50)
    price: String(required=True, max_length=30)
    is_active: Boolean(default=True)


@bakery.command(part_of="ProductPrice")
class ChangeProductPrice:
    price_id: Identifier(required=True)
    new_price: String(required=True, max_length=30)


@bakery.command(part_of="ProductPrice")
class DeactivateProductPrice:
    price_id: Identifier(required=True)


@bakery.command(part_of="ProductPrice")
class ActivateProductPrice:
    price_id: Identifier(required=True)


@bakery.command_handler(part_of=ProductPrice)
class ProductPriceManagementHandler:
    @handle(RegisterProductPrice)
    def register_product_price(self, command):
        product_price = ProductPrice.register(
            product_id=command.product_id,
            product_name=command.product_name,
            size=command.size,
            price=command.price,
            is_active=command.is_active,
            now=clock.now(),
        )
        current_domain.repository_for(ProductPrice).add(product_price)
        logger.info(
            "Product price registered",
            price_id=str(product_price.id),
            product_id=command.product_id,
            price=product_price.price,
        )
        return str(product_price.id)

    @handle(ChangeProductPrice)
    def change_product_price(self, command):
        product_price = records.load(ProductPrice, command.price_id, "price_reference_not_found", "price_id")
        product_price.change_price(command.new_price, now=clock.now())
        current_domain.repository_for(ProductPrice).add(product_price)

    @handle(DeactivateProductPrice)
    def deactivate_product_price(self, command):
        product_price = records.load(ProductPrice, command.price_id, "price_reference_not_found", "price_id")
        product_price.deactivate(now=clock.now())
        current_domain.repository_for(ProductPrice).add(product_price)

    @handle(ActivateProductPrice)
    def activate_product_price(self, command):
        product_price = records.load(ProductPrice, command.price_id, "price_reference_not_found", "price_id")
        product_price.activate(now=clock.now())
        current_domain.repository_for(ProductPrice).add(product_price)
