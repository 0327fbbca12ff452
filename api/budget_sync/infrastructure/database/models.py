"""
Modelos de base de datos (ORM).

Todas las entidades sincronizables llevan id de texto (UUID generado en el
cliente), timestamps ISO-8601 como texto y soft delete via deleted_at.
Los perfiles se borran fisicamente; su deleted_at queda siempre en NULL.
"""
from sqlalchemy import Column, String, Integer, Float, Text, JSON

from budget_sync.infrastructure.database.session import Base


class SyncColumnsMixin:
    """Columnas comunes a toda entidad sincronizable."""

    id = Column(String(64), primary_key=True)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False, index=True)
    deleted_at = Column(String(40), nullable=True, index=True)


class TenantColumnsMixin(SyncColumnsMixin):
    """Entidades que pertenecen a un perfil."""

    # Sin ForeignKey: SQLite no aplica FK por defecto y los huerfanos
    # se limpian en cada ciclo de sync.
    profile_id = Column(String(64), nullable=False, index=True)


class ProfileModel(SyncColumnsMixin, Base):
    """Perfil (tenant). Dueño de todas las demas entidades."""

    __tablename__ = "profiles"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    password_hash = Column(String(255), nullable=True)
    password_hint = Column(String(255), nullable=True)
    last_accessed_at = Column(String(40), nullable=True)

    def __repr__(self):
        return f"<Profile(id={self.id}, name={self.name})>"


class AccountModel(TenantColumnsMixin, Base):
    """Cuenta (banco, tarjeta, prestamo...)."""

    __tablename__ = "accounts"

    name = Column(String(255), nullable=False)
    budget_type = Column(String(20), nullable=True)
    account_type = Column(String(50), nullable=True)
    balance = Column(Float, default=0)
    interest_rate = Column(Float, nullable=True)
    credit_limit = Column(Float, nullable=True)
    payment_due_date = Column(String(40), nullable=True)
    minimum_payment = Column(Float, nullable=True)
    website_url = Column(String(512), nullable=True)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Account(id={self.id}, name={self.name}, balance={self.balance})>"


class CategoryModel(TenantColumnsMixin, Base):
    __tablename__ = "categories"

    name = Column(String(255), nullable=False)
    budget_type = Column(String(20), nullable=True)
    bucket_id = Column(String(64), nullable=True)
    category_group = Column(String(100), nullable=True)
    monthly_budget = Column(Float, nullable=True)
    is_fixed_expense = Column(Integer, default=0)
    is_active = Column(Integer, default=1)
    tax_deductible_by_default = Column(Integer, default=0)
    is_income_category = Column(Integer, default=0)
    exclude_from_budget = Column(Integer, default=0)
    icon = Column(String(50), nullable=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"


class TransactionModel(TenantColumnsMixin, Base):
    """
    Movimiento. Referencia cuenta, categoria, proyecto y fuente de ingreso,
    por eso se baja al final del pull.
    """

    __tablename__ = "transactions"

    date = Column(String(40), nullable=False, index=True)
    description = Column(Text, nullable=True)
    amount = Column(Float, nullable=False, default=0)
    category_id = Column(String(64), nullable=True)
    bucket_id = Column(String(64), nullable=True)
    budget_type = Column(String(20), nullable=True)
    account_id = Column(String(64), nullable=True)
    to_account_id = Column(String(64), nullable=True)
    linked_transaction_id = Column(String(64), nullable=True)
    project_id = Column(String(64), nullable=True)
    income_source_id = Column(String(64), nullable=True)
    tax_deductible = Column(Integer, default=0)
    reconciled = Column(Integer, default=0)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Transaction(id={self.id}, date={self.date}, amount={self.amount})>"


class IncomeSourceModel(TenantColumnsMixin, Base):
    __tablename__ = "income_sources"

    name = Column(String(255), nullable=False)
    budget_type = Column(String(20), nullable=True)
    income_type = Column(String(50), nullable=True)
    category_id = Column(String(64), nullable=True)
    expected_amount = Column(Float, nullable=True)
    frequency = Column(String(50), nullable=True)
    next_expected_date = Column(String(40), nullable=True)
    client_source = Column(String(255), nullable=True)
    is_active = Column(Integer, default=1)


class ProjectModel(TenantColumnsMixin, Base):
    __tablename__ = "projects"

    name = Column(String(255), nullable=False)
    budget_type = Column(String(20), nullable=True)
    project_type_id = Column(String(64), nullable=True)
    status_id = Column(String(64), nullable=True)
    income_source_id = Column(String(64), nullable=True)
    budget = Column(Float, nullable=True)
    date_created = Column(String(40), nullable=True)
    date_completed = Column(String(40), nullable=True)
    commission_paid = Column(Integer, default=0)
    notes = Column(Text, nullable=True)


class ProjectTypeModel(TenantColumnsMixin, Base):
    __tablename__ = "project_types"

    name = Column(String(255), nullable=False)
    budget_type = Column(String(20), nullable=True)
    # Lista JSON serializada como texto
    allowed_statuses = Column(Text, nullable=True)


class ProjectStatusModel(TenantColumnsMixin, Base):
    __tablename__ = "project_statuses"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)


class SyncSettingModel(Base):
    """
    Configuraciones clave/valor del motor de sync
    (auto_sync_enabled, last_synced_at).
    """

    __tablename__ = "sync_settings"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(String(40), nullable=True)

    def __repr__(self):
        return f"<SyncSetting(key={self.key}, value={self.value})>"
