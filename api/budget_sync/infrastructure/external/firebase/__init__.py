"""
Integración con Firebase: Firestore (document store) y Firebase Auth, ambos
via REST con httpx. No se usan SDKs de Google.

Objetivos de diseño:
- Todo dato del usuario queda bajo users/{uid}/...
- Un error HTTP nunca se silencia: se propaga como CloudStoreError.
"""
