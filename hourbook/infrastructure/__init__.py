"""
Infrastructure layer for Hourbook.

This layer contains the implementation details for external systems integration:
- Database (SQLAlchemy, Alembic migrations)
- Authentication (Supabase Auth)
- Invoice providers (Moneybird, Twinfield)

The infrastructure layer implements interfaces defined in the domain layer.
"""
