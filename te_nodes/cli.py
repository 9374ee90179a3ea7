#!/usr/bin/env python3
"""
te-node-describe

Rewrite the description of Tripwire Enterprise nodes from their own
Make / Model / Version fields, or from a fixed string.

  te-node-describe --nodes odenam --tag-set "Operating System:Red Hat Enterprise Linux Server 7" --dry-run
  te-node-describe --nodes web --alt-description "DMZ web tier" --append

Exit codes: 0 ok, 1 fatal (config / auth / query), 3 one or more node updates failed.
"""
import argparse
import logging
import sys
from typing import List, Optional

import requests

from .config import Settings, as_bool
from .credentials import CredentialSource, get_source
from .errors import TEError
from .logger_config import setup_logger
from .nodes_api import NodeQuery
from .report import write_csv
from .te_client import TEClient
from .updater import NodeResult, update_descriptions

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 3


def _die(msg: str) -> int:
    print(f"[!] {msg}", file=sys.stderr)
    return EXIT_FATAL


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Update Tripwire Enterprise node descriptions.")
    ap.add_argument("--nodes", default=None, help="Node name substring (empty matches all)")
    ap.add_argument("--tag-set", default=None, help='Tag filter, e.g. "Operating System:Red Hat Enterprise Linux Server 7"')
    ap.add_argument("--include-disabled", action="store_true", default=None, help="Include disabled nodes")
    ap.add_argument("--alt-description", default=None, help="Use this text instead of Make/Model/Version")
    ap.add_argument("--append", action="store_true", default=None, help="Append to the current description")
    ap.add_argument("--api-uri", default=None, help="https://<TE_server>/api/v1")
    ap.add_argument("--username", default=None)
    ap.add_argument("--credential-source", choices=["prompt", "env"], default="prompt",
                    help="Where the password comes from (default: prompt)")
    ap.add_argument("--dry-run", "--what-if", dest="dry_run", action="store_true",
                    help="Show the new descriptions without changing anything")
    ap.add_argument("--confirm", action="store_true", help="Ask before applying updates")
    tls = ap.add_mutually_exclusive_group()
    tls.add_argument("--insecure", action="store_true", help="Do NOT verify the server TLS certificate")
    tls.add_argument("--ca-bundle", default=None, help="CA bundle used to verify the server certificate")
    ap.add_argument("--csv", default=None, help="Path to write a per-node CSV report (optional)")
    ap.add_argument("--settings", default="settings.yaml", help="Settings YAML (optional)")
    ap.add_argument("--log-file", default=None)
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def ask_confirmation(planned: List[NodeResult]) -> bool:
    for res in planned[:10]:
        print(f"    {res.node_id} {res.name}: {res.old_description!r} -> {res.new_description!r}")
    if len(planned) > 10:
        print(f"    ... and {len(planned) - 10} more")
    try:
        answer = input(f"\nUpdate the description of {len(planned)} node(s)? Enter YES to proceed: ")
    except EOFError:
        # no terminal to answer from
        return False
    return answer.strip() == "YES"


def _pick(cli_value, default):
    return default if cli_value is None else cli_value


def main(argv: Optional[List[str]] = None,
         credential_source: Optional[CredentialSource] = None,
         session: Optional[requests.Session] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(log_file=args.log_file, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        s = Settings(args.settings)
    except TEError as e:
        return _die(str(e))

    api_uri = args.api_uri or s.api_uri
    if not api_uri:
        return _die("No API URI; use --api-uri, TE_URL or settings.yaml")

    verify = s.verify()
    if args.insecure:
        verify = False
    elif args.ca_bundle:
        verify = args.ca_bundle

    query = NodeQuery(
        name=_pick(args.nodes, s.default("nodes", "")) or "",
        tag_set=_pick(args.tag_set, s.default("tag_set")),
        include_disabled=as_bool(_pick(args.include_disabled, s.default("include_disabled", False))),
    )
    append = as_bool(_pick(args.append, s.default("append", False)))

    try:
        source = credential_source or get_source(args.credential_source)
        credential = source.resolve(args.username or s.username)
    except TEError as e:
        return _die(str(e))

    with TEClient(api_uri, credential, verify=verify, timeout=s.timeout,
                  proxies=s.proxies(), user_agent=s.user_agent, session=session) as client:
        print("🔐 Tripwire Enterprise Login")
        try:
            client.authenticate()
            print("[+] Authentication successful.\n")
            report = update_descriptions(
                client, query,
                alt_description=args.alt_description,
                append=append,
                dry_run=args.dry_run,
                confirm=ask_confirmation if args.confirm else None,
            )
        except TEError as e:
            return _die(str(e))

    if args.csv:
        try:
            write_csv(report, args.csv)
            print(f"[+] Wrote CSV: {args.csv}")
        except OSError as e:
            print(f"[!] Could not write CSV {args.csv}: {e}", file=sys.stderr)

    for res in report.results:
        if res.error:
            print(f"[x] {res.node_id} {res.name}: {res.error}")
        else:
            print(f"[{'~' if report.dry_run else '✓'}] {res.node_id} {res.name} -> {res.new_description}")

    mode = " (dry-run)" if report.dry_run else ""
    print(f"\nNodes: {len(report.results)}  updated: {report.updated}  "
          f"skipped: {report.skipped}  failed: {report.failed}{mode}")
    return EXIT_OK if report.ok else EXIT_PARTIAL


if __name__ == "__main__":
    sys.exit(main())
