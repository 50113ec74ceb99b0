"""
Extraktoren - SPA-Erkennung, Formate, Summaries, Struktur
"""
