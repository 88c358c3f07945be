"""
Pipeline de sincronización one-way: Google Sheets (gviz) -> base de datos.

Se ejecuta como job periódico (scheduler) o bajo demanda desde el API / CLI.

Objetivos:
- Parseo defensivo del formato gviz (JSON envuelto en un callback).
- Reemplazo por grupo: cada corrida sustituye el horario completo de los
  grupos presentes en la hoja; los grupos ausentes no se tocan.
- Idempotencia: ejecutar N veces con la misma hoja deja el mismo estado.
"""
