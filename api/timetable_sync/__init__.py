"""
Timetable Sync: horario desde Google Sheets hacia la base de datos,
consultable por API y por el bot de Telegram.
"""
