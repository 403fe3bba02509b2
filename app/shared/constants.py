# app/shared/constants.py

# Reglas de negocio
MAX_VEHICULOS_POR_CONDUCTOR = 3

# Formatos
REGEX_TELEFONO_COLOMBIA = r"^\+57\d{10}$"
REGEX_PLACA = r"^[A-Z]{3}-\d{3}$"
