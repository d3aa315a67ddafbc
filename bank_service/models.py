"""Define los modelos de las tablas 'users' y 'accounts' usando SQLAlchemy ORM."""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String
from bank_service.db import Base


class User(Base):
    """
    Modelo SQLAlchemy que representa la tabla 'users'.
    Almacena la información de autenticación de los usuarios.
    """
    __tablename__ = "users"

    # Clave primaria autoincremental
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Email del usuario, identificador único para el login
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Hash bcrypt de la contraseña (nunca la contraseña en texto plano)
    hashed_password = Column(String(255), nullable=False)

    # Rol de banquero; por defecto es un cliente normal
    is_banker = Column(Boolean, nullable=False, default=False, server_default="0")


class Account(Base):
    """
    Modelo SQLAlchemy que representa la tabla 'accounts'.
    Un usuario puede tener varias filas; la vista de saldo muestra la primera.
    """
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    # NOTA: Float se usa por simplicidad (REAL en SQLite).
    amount = Column(Float, nullable=False, default=0.0, server_default="0")

    # Etiqueta libre de la última operación
    transaction_type = Column(String(50), nullable=False, default="open")
