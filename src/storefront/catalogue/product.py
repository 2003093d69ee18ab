"""Product aggregate: one purchasable catalog record.

Products are written only by a full catalog replace; they expose no mutating
methods of their own.
"""

from protean.fields import Float, Integer, String, Text, ValueObject

from storefront.domain import storefront


@storefront.value_object(part_of="Product")
class Rating:
    """Average review score and the number of reviews behind it."""

    rate: Float(min_value=0.0, max_value=5.0)
    count: Integer(min_value=0, default=0)


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    description: Text(default="")
    category: String(max_length=100, default="")  # Free text, matched loosely
    image: String(max_length=500, default="")
    rating: ValueObject(Rating)

    @classmethod
    def create(cls, name, price, description=None, category=None, image=None, rating=None):
        """Build a product from feed-shaped values.

        ``rating`` may be a ``Rating``, a ``{"rate": .., "count": ..}`` dict or None.
        """
        if isinstance(rating, dict):
            rating = Rating(rate=rating.get("rate"), count=rating.get("count") or 0)

        return cls(
            name=name,
            price=price,
            description=description or "",
            category=category or "",
            image=image or "",
            rating=rating,
        )
