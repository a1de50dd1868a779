from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import BadRequestError, ErrorCode, NotFoundError
from storefront.domain.schemas import ProductCreate, ProductOut, ProductPage, ProductPageData, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.utils.settings import PAGE_SIZE


def _join_tags(tags) -> str:
    # ["tea", "india"] is stored as "tea,india"
    return ",".join(t.strip() for t in tags if t.strip())


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def _get_or_404(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found", ErrorCode.PRODUCT_NOT_FOUND)
        return product

    def create_product(self, payload: ProductCreate) -> ProductOut:
        product = self.repo.create_product(
            ProductModel(
                name=payload.name,
                description=payload.description,
                price=payload.price,
                tags=_join_tags(payload.tags),
            )
        )
        return ProductOut.model_validate(product)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductOut:
        product = self._get_or_404(product_id)

        data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "tags" in data:
            data["tags"] = _join_tags(data["tags"])
        for field, value in data.items():
            setattr(product, field, value)

        return ProductOut.model_validate(self.repo.save(product))

    def delete_product(self, product_id: int) -> ProductOut:
        product = self._get_or_404(product_id)
        deleted = ProductOut.model_validate(product)
        try:
            self.repo.delete_product(product)
        except IntegrityError:
            self.repo.rollback()
            raise BadRequestError("Product is part of existing orders", ErrorCode.PRODUCT_IN_USE)
        return deleted

    def get_product(self, product_id: int) -> ProductOut:
        return ProductOut.model_validate(self._get_or_404(product_id))

    def list_products(self, skip: int = 0) -> ProductPage:
        products = self.repo.list_products(skip, PAGE_SIZE)
        return ProductPage(
            count=self.repo.count(),
            data=ProductPageData(products=[ProductOut.model_validate(p) for p in products]),
        )

    def search_products(self, query: str, skip: int = 0) -> list[ProductOut]:
        return [ProductOut.model_validate(p) for p in self.repo.search(query, skip, PAGE_SIZE)]
