from decimal import Decimal

from decouple import config

# Defaults for the FinancialSettings singleton. Rates are percentages.
DEFAULT_COMMISSION_RATE = config("DEFAULT_COMMISSION_RATE", cast=Decimal, default="3.5")
DEFAULT_PASARELA_RATE = config("DEFAULT_PASARELA_RATE", cast=Decimal, default="3.5")
DEFAULT_PASARELA_FIXED = config("DEFAULT_PASARELA_FIXED", cast=Decimal, default="4.50")
DEFAULT_IVA_RATE = config("DEFAULT_IVA_RATE", cast=Decimal, default="16.0")
DEFAULT_CURRENCY = config("DEFAULT_CURRENCY", default="MXN")
