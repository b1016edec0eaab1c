from .database import Base, create_db_engine, create_session_factory, generate_id
