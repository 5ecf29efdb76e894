# Database module
from .connection import Database, get_database, get_session, write_transaction
