"""
Entry point: open the audit log, build one repo per record kind, load the default data
file if present, run the Tk main loop, close the log at shutdown.
"""

import tkinter as tk
from tkinter import messagebox

from gasnet.audit import AuditLog
from gasnet.config import AUDIT_LOG_FILENAME
from gasnet.models import Pipe, Station
from gasnet.repository import Repo
from gasnet.storage import StorageError, get_data_dir, get_data_path, load_into
from gasnet.ui import AppUI


def main() -> None:
    with AuditLog(get_data_dir() / AUDIT_LOG_FILENAME) as audit:
        audit.record("Program started")
        pipes: Repo[Pipe] = Repo("Pipe", audit)
        stations: Repo[Station] = Repo("Station", audit)

        data_path = get_data_path()
        load_error = None
        if data_path.exists():
            try:
                load_into(data_path, pipes, stations, audit)
            except StorageError as e:
                load_error = e

        root = tk.Tk()
        AppUI(root, pipes, stations, audit, data_path)
        if load_error is not None:
            messagebox.showerror("Load", f"Could not load {data_path.name}; starting empty.\n{load_error}")
        root.mainloop()
        audit.record("Program finished")


if __name__ == "__main__":
    main()
