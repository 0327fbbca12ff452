"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from budget_sync.infrastructure.database.models import (
    ProfileModel,
    AccountModel,
    CategoryModel,
    TransactionModel,
    IncomeSourceModel,
    ProjectModel,
    ProjectTypeModel,
    ProjectStatusModel,
    SyncSettingModel
)
