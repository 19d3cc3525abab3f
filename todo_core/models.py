"""
Todo Core Models Module

Pydantic models for the HTTP API: request payload validation, todo and error
responses, and the health check.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from todo_core.database import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    Todo,
)


# ==================== TODO MODELS ====================

class TodoPayload(BaseModel):
    """Model for creating or replacing a todo"""

    title: str = Field(
        ...,
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
        description=f"Todo title ({TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters)"
    )
    description: Optional[str] = Field(
        None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description=f"Todo description (max {DESCRIPTION_MAX_LENGTH} characters)"
    )
    completed: bool = Field(
        default=False,
        description="Completion status"
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Reject whitespace-only titles"""
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace only")
        return v

    def to_entity(self) -> Todo:
        """Build an unsaved Todo carrying the payload values"""
        return Todo(
            title=self.title,
            description=self.description,
            completed=self.completed,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Buy milk",
                "description": "Two litres, semi-skimmed",
                "completed": False
            }
        }


class TodoResponse(BaseModel):
    """Model for todo response"""

    id: int = Field(..., description="Unique todo identifier")
    title: str = Field(..., description="Todo title")
    description: Optional[str] = Field(None, description="Todo description")
    completed: bool = Field(..., description="Completion status")
    created_at: datetime = Field(
        ...,
        serialization_alias="createdAt",
        description="Creation timestamp"
    )
    updated_at: datetime = Field(
        ...,
        serialization_alias="updatedAt",
        description="Last update timestamp"
    )

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "title": "Buy milk",
                "description": "Two litres, semi-skimmed",
                "completed": False,
                "createdAt": "2025-11-16T09:30:00",
                "updatedAt": "2025-11-16T09:30:00"
            }
        }


# ==================== HEALTH & ERROR MODELS ====================

class HealthResponse(BaseModel):
    """Model for health check response"""

    status: str = Field(..., description="Service status (healthy, degraded)")
    version: str = Field(..., description="API version")
    environment: str = Field(..., description="Deployment environment")
    timestamp: datetime = Field(..., description="Health check timestamp")
    database: str = Field(..., description="Database status (connected, unavailable)")
    todos_completed: Optional[int] = Field(None, ge=0, description="Completed todos in database")
    todos_pending: Optional[int] = Field(None, ge=0, description="Pending todos in database")


class ErrorResponse(BaseModel):
    """Model for error response"""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code")
    timestamp: datetime = Field(..., description="Error timestamp")
    path: Optional[str] = Field(None, description="Request path that caused the error")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "ValidationError",
                "message": "Invalid input data",
                "detail": "title: String should have at most 100 characters",
                "status_code": 400,
                "timestamp": "2025-11-16T09:30:00",
                "path": "/api/todos"
            }
        }
