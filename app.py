"""
RepLadder – Liegestütz-/Klimmzug-Progressionstracker
----------------------------------------------------
Startpunkt für die lokale Entwicklung.

Funktionen:
- Trainingsplan-Generator (Ruhetage, Tagesziele, Satzaufteilung)
- XP-/Level-System mit Streak- und Tagesziel-Bonus
- SQLite-Persistenz mit automatischer Ordner- und Tabellenerstellung
"""

from repladder import create_app
from repladder.db import get_db, init_db
from repladder.seed import seed_catalog

app = create_app()


if __name__ == "__main__":
    with app.app_context():
        init_db()  # DB anlegen, falls nicht vorhanden
        seed_catalog(get_db())
        get_db().commit()
    print(f"[RepLadder] Läuft mit Datenbank: {app.config['DATABASE']}")
    app.run(debug=True)
