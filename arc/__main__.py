"""
Punto de entrada: python -m arc
"""

from arc.cli.app import main

if __name__ == "__main__":
    main()
