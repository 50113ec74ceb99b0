"""
Fetcher - HTTP-Akquise und Pipeline-Orchestrierung
"""
