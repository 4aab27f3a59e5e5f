"""Shop API: users, buyers, products, orders, ratings, vouchers and books over FastAPI."""
