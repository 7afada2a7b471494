"""
RepLadder – Instanzkonfiguration
--------------------------------
Vorlage für `instance/config.py`. Diese Datei enthält lokale bzw. sensible
Einstellungen, die nicht im öffentlichen Repository landen sollten.

Sie wird von `create_app()` per `app.config.from_pyfile("config.py", silent=True)`
aus dem Instance-Ordner gelesen (kopieren nach instance/config.py).
"""

# ⚙️ Flask-Grundeinstellungen
SECRET_KEY = "my-very-secret-key"   # Bitte ändern für Produktivbetrieb!
DEBUG = True                        # Debugmodus für lokale Entwicklung
TESTING = False                     # False lassen, außer beim Unit-Testing

# 💾 Datenbankpfad (kann angepasst werden)
DATABASE = "instance/repladder.db"

# 📝 Logging
LOG_LEVEL = "INFO"

# 💪 Übung, wenn der Client keine angibt ("pushups" | "pullups")
DEFAULT_EXERCISE = "pushups"
