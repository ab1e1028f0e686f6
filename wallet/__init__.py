"""
Mi Billetera - Source Package

A personal expense wallet: biometric sign-in, then record, list, delete
and review monthly statistics on discretionary expenses, stored locally.

DESIGN PRINCIPLES:
1. Memory and disk always agree
2. Bad input is rejected, never silently corrected
3. Nothing is deleted without explicit confirmation
4. Every mutation is auditable
5. Storage medium is swappable
"""

__version__ = "1.0.0"
__author__ = "Mi Billetera Team"
