"""SQL table definitions for the MySQL storage engine."""

from sqlalchemy import (
    TIMESTAMP,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    false,
    func,
)
from sqlalchemy.dialects import mysql

from photoflow.domain.models import PaymentStatus, ProjectStage, ProjectStatus

metadata = MetaData()

# Gallery and cover images may be inline data URLs.
_IMAGE_TEXT = Text().with_variant(mysql.LONGTEXT(), "mysql")
_PRECISE_DATETIME = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("name", String(255)),
    Column("company", String(255)),
    Column("phone", String(255)),
    Column("profileComplete", Boolean, nullable=False, server_default=false()),
    Column("portfolioSlug", String(255), unique=True),
    Column("profilePictureUrl", _IMAGE_TEXT),
    Column("bio", Text),
    Column("website", Text),
    Column("instagram", Text),
    Column("twitter", Text),
    Column("createdAt", TIMESTAMP, server_default=func.current_timestamp()),
    mysql_engine="InnoDB",
)

projects = Table(
    "projects",
    metadata,
    Column("id", String(255), primary_key=True),
    Column("clientName", String(255), nullable=False),
    Column("date", Date, nullable=False),
    Column("location", String(255)),
    Column("photographer", String(255)),
    Column(
        "status",
        Enum(*[status.value for status in ProjectStatus], name="project_status"),
        nullable=False,
    ),
    Column(
        "stage",
        Enum(*[stage.value for stage in ProjectStage], name="project_stage"),
        nullable=False,
    ),
    Column("income", Numeric(10, 2, asdecimal=False), server_default="0"),
    Column("expenses", Numeric(10, 2, asdecimal=False), server_default="0"),
    Column(
        "paymentStatus",
        Enum(*[status.value for status in PaymentStatus], name="payment_status"),
        nullable=False,
    ),
    Column("description", Text),
    Column("imageUrl", _IMAGE_TEXT),
    Column(
        "user_email",
        String(255),
        ForeignKey("users.email", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("createdAt", _PRECISE_DATETIME, nullable=False),
    mysql_engine="InnoDB",
)

gallery_images = Table(
    "gallery_images",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "project_id",
        String(255),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("imageUrl", _IMAGE_TEXT, nullable=False),
    Column("createdAt", TIMESTAMP, server_default=func.current_timestamp()),
    mysql_engine="InnoDB",
)
