from typing import List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def count(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def list_products(self, skip: int, limit: int) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel).order_by(ProductModel.id).offset(skip).limit(limit)
            ).scalars()
        )

    def search(self, query: str, skip: int, limit: int) -> List[ProductModel]:
        # user input is matched literally, wildcards included
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        return list(
            self.db.execute(
                select(ProductModel)
                .where(
                    or_(
                        ProductModel.name.ilike(pattern, escape="\\"),
                        ProductModel.description.ilike(pattern, escape="\\"),
                        ProductModel.tags.ilike(pattern, escape="\\"),
                    )
                )
                .order_by(ProductModel.id)
                .offset(skip)
                .limit(limit)
            ).scalars()
        )

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
