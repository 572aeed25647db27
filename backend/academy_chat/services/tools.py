"""
Chat Tools

The two functions the model may call mid-conversation. Each tool is a
request-scoped object bound to the record store, with a pydantic model
for its arguments. Arguments are validated before the handler runs; a
validation failure is returned to the model as an error result so it can
ask the user again.

Handlers never raise: store failures come back as {"status": "error"}.
"""

from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from academy_chat.services.record_store import RecordStore, TrialSessionData


class NoArguments(BaseModel):
    pass


class ToolDefinition(BaseModel):
    name: str
    description: str
    parameters: type[BaseModel]
    handler: Callable[[Any], Awaitable[dict]]

    def openai_spec(self) -> dict:
        schema = self.parameters.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": schema,
            },
        }


# ── Handlers ──────────────────────────────────────────────────────────────────

async def book_trial_session(store: RecordStore, args: TrialSessionData) -> dict:
    print(f"[Tools] 'book_trial_session' called with args: {args.model_dump()}")
    result = await store.create(args)
    details = args.model_dump(mode="json")
    if result.success:
        return {
            "status": "success",
            "message": (
                f"¡Clase de prueba registrada exitosamente! ID de registro: {result.id}. "
                "Nos pondremos en contacto pronto para confirmar los detalles."
            ),
            "details": details,
        }
    return {
        "status": "error",
        "message": (
            f"Hubo un problema al registrar la clase de prueba: {result.error}. "
            "Por favor, intenta más tarde o contacta a soporte."
        ),
        "details": details,
    }


async def get_alumnos_list(store: RecordStore) -> dict:
    print("[Tools] 'get_alumnos_list' called.")
    # Always a fresh read; the count must reflect bookings made moments ago
    result = await store.list_all()
    if not result.success:
        error = result.error or "Error desconocido durante la obtención de alumnos"
        return {
            "status": "error",
            "message": f"Error al obtener la lista de alumnos: {error}.",
        }

    if result.count == 0:
        return {
            "status": "success",
            "message": "No hay alumnos registrados actualmente.",
            "count": 0,
        }

    return {
        "status": "success",
        "message": f"Se encontraron {result.count} alumnos.",
        "count": result.count,
        "preview": [{"nombre": r.childrenFullName} for r in result.records[:3]],
    }


# ── Registry ──────────────────────────────────────────────────────────────────

def build_chat_tools(store: RecordStore) -> dict[str, ToolDefinition]:
    """Create the tools for one chat request."""
    tools = [
        ToolDefinition(
            name="book_trial_session",
            description=(
                "Registra una sesión de prueba gratuita para un niño/a en Americano FC "
                "Academy Perú. ESTA HERRAMIENTA SÓLO DEBE LLAMARSE DESPUÉS DE HABER "
                "RECOPILADO Y CONFIRMADO TODOS LOS DATOS REQUERIDOS DEL USUARIO."
            ),
            parameters=TrialSessionData,
            handler=lambda args: book_trial_session(store, args),
        ),
        ToolDefinition(
            name="get_alumnos_list",
            description=(
                "Obtiene el listado o recuento ACTUALIZADO y EN TIEMPO REAL de los alumnos "
                "registrados en la academia. Usar SIEMPRE que el usuario pregunte "
                "explícitamente por información de alumnos (ej. 'cuántos alumnos hay', "
                "'ver lista de alumnos') para asegurar datos recientes."
            ),
            parameters=NoArguments,
            handler=lambda args: get_alumnos_list(store),
        ),
    ]
    return {tool.name: tool for tool in tools}


async def execute_tool(
    tools: dict[str, ToolDefinition],
    name: str,
    raw_arguments: str,
) -> dict:
    """Validate the model's arguments and run the tool."""
    tool = tools.get(name)
    if tool is None:
        return {"status": "error", "message": f"Herramienta desconocida: {name}"}

    try:
        args = tool.parameters.model_validate_json(raw_arguments or "{}")
    except ValidationError as e:
        print(f"[Tools] Invalid arguments for '{name}': {e.error_count()} error(s)")
        return {
            "status": "error",
            "message": "Los datos proporcionados no son válidos. Corrige los campos indicados.",
            "errors": [
                {
                    "field": ".".join(str(loc) for loc in err["loc"]),
                    "message": err["msg"],
                }
                for err in e.errors()
            ],
        }

    return await tool.handler(args)
