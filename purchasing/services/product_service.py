from typing import Any, Dict, List, Optional

from django.conf import settings

from purchasing.models import Product
from purchasing.services.base_service import BaseService


class ProductService(BaseService):

    model = Product

    @classmethod
    def find_by_id(cls, product_id: Any) -> Optional[Product]:
        if product_id in (None, ""):
            return None
        return cls.get_by_id(product_id)

    @classmethod
    def search(cls, term: str = "", limit: int = None) -> List[Product]:
        limit = limit or settings.PRODUCT_SEARCH_LIMIT
        queryset = cls.get_active()
        if term:
            queryset = queryset.filter(name__icontains=term.strip())
        return list(queryset.order_by("name")[:limit])

    @classmethod
    def serialize_option(cls, product: Product) -> Dict[str, Any]:
        return {
            "id": product.id,
            "name": product.name,
            "initial_price": str(product.initial_price),
            "selling_price": str(product.selling_price),
        }
