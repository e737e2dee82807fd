from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Login never asks for the name, the password alone identifies the account
    name = Column(String, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash
    allowed_devices = Column(Integer, nullable=False, default=1)
    is_suspended = Column(Boolean, nullable=False, default=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relations
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    sent_messages = relationship("Message", foreign_keys="Message.sender_id", back_populates="sender", cascade="all, delete-orphan", passive_deletes=True)
    received_messages = relationship("Message", foreign_keys="Message.receiver_id", back_populates="receiver", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', is_admin={self.is_admin}, is_suspended={self.is_suspended})>"
