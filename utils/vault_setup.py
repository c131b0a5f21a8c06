"""
utils/vault_setup.py
────────────────────
Script utilitário CLI para gerenciar o cofre de credenciais do serviço de discovery.

Uso:
    python -m utils.vault_setup generate-key
    python -m utils.vault_setup add --name NOME [--username USUARIO]
    python -m utils.vault_setup list

Exemplos:
    # 1. Gerar uma nova Master Key (copie para sua variável de ambiente)
    python -m utils.vault_setup generate-key

    # 2. Exportar a Master Key no ambiente (sessão atual)
    export DISCOVERY_MASTER_KEY="sua-chave-aqui"

    # 3. Cadastrar uma credencial SSH
    python -m utils.vault_setup add --name borda-admin --username admin

    # 4. Listar credenciais cadastradas
    python -m utils.vault_setup list

Segurança:
    - A senha é lida via getpass (não aparece no terminal).
    - A Master Key NUNCA é salva em arquivo pelo script.
    - O script NUNCA exibe senhas: apenas id, nome, tipo e usuário.

O banco usado é o de ``DISCOVERY_DB_PATH`` (ou o padrão do projeto).
"""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from typing import Optional, Sequence

from core import db
from core.repositories.credentials_repository import (
    create_credential,
    list_credentials,
)
from utils.vault import ENV_MASTER_KEY, VaultError, generate_master_key


def _open_database() -> None:
    db_path = os.getenv("DISCOVERY_DB_PATH")
    if db_path:
        db.set_db_path(db_path)
    db.ensure_schema()


def _cmd_generate_key(args: argparse.Namespace) -> int:
    """Gera e exibe uma nova Master Key Fernet."""
    key = generate_master_key()
    print("\n" + "═" * 64)
    print("  NOVA MASTER KEY (Fernet / AES-128-CBC)")
    print("═" * 64)
    print(f"\n  {key}\n")
    print("  INSTRUÇÕES:")
    print("  1. Copie a chave acima.")
    print("  2. Configure a variável de ambiente:")
    print(f'     export {ENV_MASTER_KEY}="{key}"')
    print("  3. NUNCA versione esta chave no Git.")
    print("═" * 64 + "\n")
    return 0


def _cmd_add(args: argparse.Namespace) -> int:
    """Cadastra uma credencial SSH (senha via getpass)."""
    username = (args.username or input("  Username SSH: ")).strip()
    if not username:
        print("  ERRO: Username não pode ser vazio.", file=sys.stderr)
        return 1

    password = getpass.getpass("  Password SSH: ")
    if not password:
        print("  ERRO: Password não pode ser vazio.", file=sys.stderr)
        return 1

    attributes = {"username": username, "password": password}
    if args.device_type:
        attributes["device_type"] = args.device_type

    try:
        _open_database()
        credential_id = create_credential(
            name=args.name, type="SSH", attributes=attributes,
        )
    except VaultError as exc:
        print(f"\n  ERRO: {exc}", file=sys.stderr)
        return 1

    print(f"\n  ✓ Credencial '{args.name}' salva (id={credential_id}).\n")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    """Lista credenciais cadastradas (sem exibir senhas)."""
    try:
        _open_database()
        credentials = list_credentials()
    except VaultError as exc:
        print(f"\n  ERRO: {exc}", file=sys.stderr)
        return 1

    if not credentials:
        print("\n  Nenhuma credencial cadastrada.\n")
        return 0

    print("\n" + "═" * 50)
    print("  CREDENCIAIS (sem senhas)")
    print("═" * 50)
    for credential in credentials:
        print(
            f"    ├─ {credential['id']}: "
            f"name={credential['name']}, "
            f"type={credential['type']}, "
            f"user={credential['attributes'].get('username', '?')}"
        )
    print("═" * 50 + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vault_setup",
        description="Gestão das credenciais criptografadas do serviço de discovery.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Comandos disponíveis")

    # ── generate-key ──────────────────────────────────────────────────────
    subparsers.add_parser(
        "generate-key",
        help="Gera uma nova Master Key Fernet (AES-128-CBC).",
    )

    # ── add ───────────────────────────────────────────────────────────────
    add_parser = subparsers.add_parser(
        "add",
        help="Cadastra uma credencial SSH.",
    )
    add_parser.add_argument("--name", required=True, help="Nome da credencial.")
    add_parser.add_argument("--username", default=None, help="Usuário SSH.")
    add_parser.add_argument(
        "--device-type", default=None,
        help="device_type Netmiko (omitido → autodetecção).",
    )

    # ── list ──────────────────────────────────────────────────────────────
    subparsers.add_parser(
        "list",
        help="Lista credenciais cadastradas (sem exibir senhas).",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Ponto de entrada do CLI de gestão do cofre."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "generate-key":
        return _cmd_generate_key(args)
    if args.command == "add":
        return _cmd_add(args)
    if args.command == "list":
        return _cmd_list(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
