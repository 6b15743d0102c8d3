# src/main.py
# python src/main.py <commande> ...  (équivalent du script asset-tracker)

from __future__ import annotations

from cli.commands import main


if __name__ == "__main__":
    main()
