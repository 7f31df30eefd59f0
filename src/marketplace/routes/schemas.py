from marshmallow import EXCLUDE, Schema, fields, post_load, validate, validates_schema, ValidationError

SORT_OPTIONS = ("curated", "trending", "hot_and_new")


def canonical_product_id(value: str) -> str:
    """Leading zeros are dropped so 01 and 1 name the same product; non-numeric ids are left alone."""
    value = value.strip()
    if value.isascii() and value.isdigit():
        return str(int(value))
    return value


class ProductIdField(fields.Field):
    """Product ids arrive as JSON numbers or strings; carts keep them as canonical strings."""

    default_error_messages = {"invalid": "Not a valid product id."}

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise self.make_error("invalid")
        value = canonical_product_id(str(value))
        if not (value.isascii() and value.isdigit()):
            raise self.make_error("invalid")
        return value


class ProductFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    category = fields.Str(load_default=None)
    tenant_slug = fields.Str(load_default=None)
    search = fields.Str(load_default=None, validate=validate.Length(max=100))
    min_price = fields.Decimal(load_default=None, validate=validate.Range(min=0))
    max_price = fields.Decimal(load_default=None, validate=validate.Range(min=0))
    tags = fields.Str(load_default=None)
    sort = fields.Str(load_default="curated", validate=validate.OneOf(SORT_OPTIONS))
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(load_default=20, validate=validate.Range(min=1, max=100))

    @validates_schema
    def validate_price_range(self, data, **kwargs):
        min_price, max_price = data.get("min_price"), data.get("max_price")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("min_price cannot be greater than max_price.", "min_price")

    @post_load
    def split_tags(self, data, **kwargs):
        raw = data.get("tags")
        data["tags"] = [tag.strip() for tag in raw.split(",") if tag.strip()] if raw else []
        return data


class AddCartItemSchema(Schema):
    product_id = ProductIdField(required=True)


class CheckoutSchema(Schema):
    # Defaults to the tenant cart kept in the session
    product_ids = fields.List(ProductIdField(), load_default=None)
