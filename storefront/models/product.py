"""Product catalog models"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ProductOption(BaseModel):
    """A selectable axis of a product, e.g. Size or Color"""
    name: str = Field(min_length=1)
    values: list[str] = Field(min_length=1)
    # value -> CSS color used for swatch buttons
    swatches: dict[str, str] = Field(default_factory=dict)

    @property
    def has_swatches(self) -> bool:
        return bool(self.swatches)


class ProductVariant(BaseModel):
    """A concrete purchasable combination of option values"""
    id: str
    options: dict[str, str] = Field(default_factory=dict)
    price: Decimal = Field(gt=0)
    compare_at_price: Optional[Decimal] = Field(default=None, gt=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    available: bool = True
    image: Optional[str] = None

    class Config:
        frozen = True

    @property
    def in_stock(self) -> bool:
        if not self.available:
            return False
        return self.stock_quantity is None or self.stock_quantity > 0


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = Field(gt=0)
    compare_at_price: Optional[Decimal] = Field(default=None, gt=0)
    options: list[ProductOption] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)
    # Used only when the product has no variants
    in_stock: bool = True
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    images: list[str] = Field(default_factory=list)
    featured: bool = False
    tags: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    @property
    def option_names(self) -> list[str]:
        return [option.name for option in self.options]

    def get_option(self, name: str) -> Optional[ProductOption]:
        return next((option for option in self.options if option.name == name), None)

    def integrity_problems(self) -> list[str]:
        """
        Check that options and variants agree.

        Returns:
            Human readable descriptions of every problem found
        """
        problems = []
        declared: dict[str, set[str]] = {}

        for option in self.options:
            if option.name in declared:
                problems.append(f"option {option.name!r} declared twice")
                continue
            if len(set(option.values)) != len(option.values):
                problems.append(f"option {option.name!r} repeats a value")
            declared[option.name] = set(option.values)
            for value in option.swatches:
                if value not in declared[option.name]:
                    problems.append(f"swatch for undeclared value {option.name}={value!r}")

        seen_ids: set[str] = set()
        seen_combinations: dict[tuple, str] = {}

        for variant in self.variants:
            if variant.id in seen_ids:
                problems.append(f"variant id {variant.id!r} used twice")
            seen_ids.add(variant.id)

            missing = [name for name in declared if name not in variant.options]
            if missing:
                problems.append(f"variant {variant.id!r} has no value for {', '.join(missing)}")

            for name, value in variant.options.items():
                if name not in declared:
                    problems.append(f"variant {variant.id!r} uses undeclared option {name!r}")
                elif value not in declared[name]:
                    problems.append(f"variant {variant.id!r} uses undeclared value {name}={value!r}")

            combination = tuple(sorted(variant.options.items()))
            if combination in seen_combinations:
                problems.append(
                    f"variants {seen_combinations[combination]!r} and {variant.id!r} "
                    f"share the same options"
                )
            else:
                seen_combinations[combination] = variant.id

        return problems

    @model_validator(mode="after")
    def check_integrity(self) -> "Product":
        problems = self.integrity_problems()
        if problems:
            raise ValueError("; ".join(problems))
        return self


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int
