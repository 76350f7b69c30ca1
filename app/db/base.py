from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models import Base from here; app.db.models imports every model so that
# Base.metadata is complete for create_all() and alembic autogenerate.
