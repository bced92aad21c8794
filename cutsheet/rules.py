"""
Deterministic reshaping rules.

This file exists to make the output contract explicit and enforceable.
"""

# ";" wins when present anywhere in the input, otherwise ","
PREFERRED_DELIMITER = ";"
FALLBACK_DELIMITER = ","

# Columns 0-2 are not operators: unused, date, line
DATE_COLUMN = 1
LINE_COLUMN = 2
FIRST_OPERATOR_COLUMN = 3

MIN_HEADER_CELLS = 4
MIN_DATA_CELLS = 3

TOTAL_MARKER = "total"

OUTPUT_DELIMITER = ","
OUTPUT_HEADER = ("Fecha", "Línea", "Operador", "Cantidad")
OUTPUT_LINE_TERMINATOR = "\n"

DOWNLOAD_FILENAME = "Para_Pegar_En_Total.csv"
