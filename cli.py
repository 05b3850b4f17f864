"""
Interactive menu shell.

A thin line-oriented front end over AuthorizationSession: it reads menu
choices and arguments from a text stream and prints results. It holds no
policy of its own.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Dict, Iterator, Optional, TextIO

from config import AppConfig
from distributors import DistributorError
from regions import RegionError
from tools import AuthorizationSession

LOG = logging.getLogger("cli")

MENU = """
----- Menu -----
1. Create Distributor
2. Add Region to Distributor
3. Exclude Region from Distributor
4. Add Parent to Distributor
5. Check Distributor Permission
6. List Distributors
7. Remove Region from Distributor
8. Exit"""


class _EndOfInput(Exception):
    pass


class MenuShell:
    """Numbered-menu loop bound to one session and a pair of streams."""

    def __init__(
        self,
        session: AuthorizationSession,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.session = session
        self._lines: Iterator[str] = iter(stdin or sys.stdin)
        self._out = stdout or sys.stdout
        self._actions: Dict[str, Callable[[], None]] = {
            "1": self.create_distributor,
            "2": self.add_region,
            "3": self.exclude_region,
            "4": self.add_parent,
            "5": self.check_permission,
            "6": self.list_distributors,
            "7": self.remove_region,
        }

    def _print(self, text: str = "") -> None:
        print(text, file=self._out)

    def _ask(self, prompt: str) -> str:
        self._out.write(prompt)
        try:
            return next(self._lines).strip()
        except StopIteration:
            raise _EndOfInput() from None

    def run(self) -> None:
        while True:
            self._print(MENU)
            try:
                option = self._ask("Enter option: ")
            except _EndOfInput:
                break
            if option == "8":
                self._print("Exiting.")
                return
            action = self._actions.get(option)
            if action is None:
                self._print("Invalid option. Please try again.")
                continue
            try:
                action()
            except _EndOfInput:
                break
            except (DistributorError, RegionError) as exc:
                self._print(f"Error: {exc}")

    def create_distributor(self) -> None:
        distributor_id = self._ask("Enter distributor ID (unique string): ")
        name = self._ask("Enter distributor Name: ")
        paths = self._ask(
            "Enter authorized region paths (comma separated, "
            "e.g. 'India-Tamil Nadu-Keelakarai, India-Jammu and Kashmir-Punch'): "
        )
        result = self.session.create_distributor(distributor_id, name, paths.split(","))
        for path in result.skippedPaths:
            self._print(f"Region '{path}' not found. Skipping.")
        self._print("Distributor created.")

    def add_region(self) -> None:
        distributor_id = self._ask("Enter distributor ID: ")
        path = self._ask("Enter region path to add (e.g. 'India-Tamil Nadu-Keelakarai'): ")
        self.session.add_region(distributor_id, path)
        self._print("Region added to distributor.")

    def remove_region(self) -> None:
        distributor_id = self._ask("Enter distributor ID: ")
        path = self._ask("Enter region path to remove: ")
        self.session.remove_region(distributor_id, path)
        self._print("Region removed from distributor.")

    def exclude_region(self) -> None:
        distributor_id = self._ask("Enter distributor ID: ")
        path = self._ask("Enter region path to exclude: ")
        self.session.exclude_region(distributor_id, path)
        self._print("Region excluded from distributor.")

    def add_parent(self) -> None:
        child_id = self._ask("Enter child distributor ID: ")
        parent_id = self._ask("Enter parent distributor ID: ")
        self.session.add_parent(child_id, parent_id)
        self._print("Parent added to distributor.")

    def check_permission(self) -> None:
        distributor_id = self._ask("Enter distributor ID: ")
        path = self._ask("Enter region path to check (e.g. 'India-Tamil Nadu-Keelakarai'): ")
        check = self.session.check_permission(distributor_id, path)
        self._print("Permission granted!" if check.granted else "Permission denied!")

    def list_distributors(self) -> None:
        self._print("Listing Distributors:")
        for summary in self.session.list_distributors().distributors:
            self._print("--------------------------------")
            self._print(f"ID: {summary.id}, Name: {summary.name}")
            self._print(f"  Parents: {', '.join(summary.parents)}")
            self._print(f"  Excluded Regions: {', '.join(summary.excludedRegions)}")
            self._print(f"  Effective Authorized Regions: {', '.join(summary.effectiveRegions)}")
            self._print("--------------------------------")


def main() -> None:
    config = AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    session = AuthorizationSession(config=config)
    try:
        session.load_regions()
    except FileNotFoundError:
        LOG.error("Region dataset %s not found", config.cities_csv)
        raise SystemExit(1)
    MenuShell(session).run()


if __name__ == "__main__":
    main()
