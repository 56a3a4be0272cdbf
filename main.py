import asyncio
import mimetypes
import os
import shlex
import sqlite3
from pathlib import Path

from agen_rp.bootstrap.bootstrapper import AssistantSession, bootstrap_session
from agen_rp.entities.attachment import encode_data_uri
from agen_rp.entities.document import UploadedFile
from agen_rp.entities.errors import AssistantError

HELP_TEXT = """Arahan:
  /upload <fail...>   Muat naik dokumen rujukan (PDF, TXT, MD)
  /docs               Senarai dokumen aktif
  /remove <id>        Buang dokumen
  /image <fail>       Lampirkan gambar pada soalan seterusnya
  /key <api-key>      Simpan API Key
  /forget-key         Padam API Key yang disimpan
  /transcript         Papar transkrip perbualan
  /quit               Keluar"""


def _read_upload(path: str) -> UploadedFile:
    file_path = Path(path).expanduser()
    mime_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return UploadedFile(file_path.name, mime_type, file_path.read_bytes())


def _read_image(path: str) -> str:
    file_path = Path(path).expanduser()
    mime_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return encode_data_uri(mime_type, file_path.read_bytes())


async def handle_command(
    session: AssistantSession, command: str, argument: str, pending: dict
) -> bool:
    conversation = session.conversation

    if command == "/quit":
        return False
    if command == "/help":
        print(HELP_TEXT)
    elif command == "/upload":
        uploads = [_read_upload(path) for path in shlex.split(argument)]
        added = conversation.add_documents(uploads)
        print(conversation.messages[-1].content if added else "Tiada fail diberi.")
    elif command == "/docs":
        if not conversation.documents:
            print("Tiada Dokumen Rujukan")
        for document in conversation.documents:
            print(f"{document.id}  {document.name} ({document.mime_type})")
    elif command == "/remove":
        removed = conversation.remove_document(argument.strip())
        print(f"Dokumen '{removed.name}' dibuang.")
    elif command == "/image":
        pending["image"] = _read_image(argument.strip())
        print("Gambar akan dilampirkan pada soalan seterusnya.")
    elif command == "/key":
        session.credentials.set(argument)
        print("API Key disimpan.")
    elif command == "/forget-key":
        session.credentials.clear()
        print("API Key dipadam.")
    elif command == "/transcript":
        print(conversation.transcript() or "Tiada perbualan untuk dikongsi.")
    else:
        print(HELP_TEXT)
    return True


async def run_command(session: AssistantSession, line: str, pending: dict) -> bool:
    command, _, argument = line.partition(" ")
    try:
        return await handle_command(session, command, argument, pending)
    except (AssistantError, KeyError, OSError, ValueError, sqlite3.Error) as e:
        print(f"Ralat: {e}")
        return True


async def main():
    session = bootstrap_session(env=os.getenv("AGEN_RP_ENV", "development"))
    conversation = session.conversation
    pending: dict = {}

    print(conversation.messages[0].content)
    print("Taip /help untuk senarai arahan.")

    while True:
        line = (await asyncio.to_thread(input, "\n> ")).strip()
        if not line:
            continue

        if line.startswith("/"):
            if not await run_command(session, line, pending):
                break
            continue

        try:
            reply = await conversation.send(line, image=pending.pop("image", None))
        except AssistantError as e:
            print(f"Ralat: {e}")
            continue
        print(f"\n{reply.content}")


if __name__ == "__main__":
    asyncio.run(main())
