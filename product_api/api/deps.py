# product_api/api/deps.py
from fastapi import Request
from product_api.domain.repositories.product_repo import ProductRepo

# Dependency for injecting the product store built by the lifespan; tests override this one
def product_repo(request: Request) -> ProductRepo:
    # one instance per process so it remembers whether its indexes exist
    return request.app.state.product_repo
