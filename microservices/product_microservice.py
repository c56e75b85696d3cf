from typing import List, Optional
from rapidfuzz import process, utils

FUZZY_THRESHOLD = 85


def matches_search(search: str, product: dict) -> bool:
    # plain substring first, then a fuzzy match on the name words and category to forgive typos
    if not search:
        return True
    if utils.default_process(search) in utils.default_process(product.get("name", "")):
        return True
    choices = [word for word in product.get("name", "").split() if len(word) > 2]
    if product.get("category"):
        choices.append(product["category"])
    if not choices:
        return False
    best = process.extractOne(search, choices, processor=utils.default_process)
    return best is not None and best[1] > FUZZY_THRESHOLD


def filter_products(products: List[dict], search: Optional[str] = None, price_from: float = 0,
                    price_to: float = 100000, category: Optional[str] = None) -> List[dict]:
    return [
        product for product in products
        if matches_search(search, product)
        and price_from <= product.get("price", 0) <= price_to
        and (not category or product.get("category") == category)
    ]


def sort_products(products: List[dict], sort_by: Optional[str]) -> List[dict]:
    match sort_by:
        case "price-asc":
            return sorted(products, key=lambda p: p.get("price", 0))
        case "price-desc":
            return sorted(products, key=lambda p: p.get("price", 0), reverse=True)
        case "name-asc":
            return sorted(products, key=lambda p: p.get("name", "").casefold())
        case "name-desc":
            return sorted(products, key=lambda p: p.get("name", "").casefold(), reverse=True)
        case "rating":
            return sorted(products, key=lambda p: p.get("rating", 0), reverse=True)
    # popularity keeps the catalog order
    return list(products)


def review_summary(reviews: List[dict]):
    # returns (num_reviews, average rating)
    if not reviews:
        return 0, 0
    return len(reviews), sum(review["rating"] for review in reviews) / len(reviews)
