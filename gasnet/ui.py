"""
Design (ui.py)
- Purpose: Build and manage the Tkinter UI (two Treeviews, filters, dialogs, sorting, save/load).
- Inputs: Pipe and Station repos, the AuditLog, default data path.
- Outputs: None (renders UI, calls into repos, batch editor and storage).
- Side effects: Creates windows; reads/writes the data file; desktop notifications.
- Thread-safety: Everything runs on the Tk main thread.
"""

import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Callable, List, Optional, Tuple

from plyer import notification

from . import batch, filters
from .audit import AuditLog
from .config import (
    APP_TITLE,
    CLASSIFICATION_OPTIONS,
    LOG_MAX_LINES,
    MIN_PIPE_DIAMETER_MM,
    MIN_PIPE_LENGTH_KM,
    MIN_TOTAL_WORKSHOPS,
    NOTIFICATION_TIMEOUT_SEC,
)
from .models import Pipe, Station
from .repository import Repo
from .storage import StorageError, load_into, save_snapshot
from .utils import (
    clean_text,
    format_pipe_row,
    format_station_row,
    parse_float,
    parse_id_list,
    parse_int,
)

BG = "#1e1e1e"
FIELD_BG = "#2b2b2b"

REPAIR_FILTER_OPTIONS = {"Any": None, "Under repair": True, "In service": False}


class AppUI:
    """
    Design (AppUI)
    - Purpose: Encapsulate all UI creation and behavior.
    - Public attributes:
        enable_notifications (tk.BooleanVar): toggles desktop notifications after save/load
        show_logs (tk.BooleanVar): toggles visibility of the logs panel (audit lines)
    - Public methods:
        refresh_ui(): repaint both tables from the repos, honoring active filters and sort
        on_audit(): AuditLog listener appending one line to the Logs panel
    """

    def __init__(
        self,
        root: tk.Tk,
        pipes: Repo[Pipe],
        stations: Repo[Station],
        audit: AuditLog,
        data_path: Path,
    ):
        self.root = root
        self.pipes = pipes
        self.stations = stations
        self.audit = audit
        self.data_path = Path(data_path)

        # UI state variables
        self.enable_notifications = tk.BooleanVar(value=True)
        self.show_logs = tk.BooleanVar(value=False)
        self.pipe_name_filter = tk.StringVar()
        self.pipe_repair_filter = tk.StringVar(value="Any")
        self.station_name_filter = tk.StringVar()
        self.station_unused_filter = tk.StringVar()
        self.sort_state = {
            "pipes": {"column": None, "order": None},
            "stations": {"column": None, "order": None},
        }
        # Criteria of the last Search press; typing in the filter fields alone changes nothing
        self.pipe_search = filters.PipeSearch()
        self.station_search = filters.StationSearch()
        # Ids currently shown in the pipes table (the last search result)
        self._found_pipes: set[int] = set()
        self._action_frames: dict[str, tk.Frame] = {}

        # Window
        self.root.title(APP_TITLE)
        self.root.rowconfigure(0, weight=1)
        self.root.columnconfigure(0, weight=1)
        self.root.configure(bg=BG)

        # Paned window: top = notebook + buttons, bottom = logs (when shown)
        self.paned = ttk.PanedWindow(self.root, orient=tk.VERTICAL)
        self.paned.grid(row=0, column=0, sticky="nsew")

        content_frame = tk.Frame(self.paned, bg=BG)
        content_frame.rowconfigure(0, weight=1)
        content_frame.columnconfigure(0, weight=1)
        self.paned.add(content_frame, weight=1)

        self.bottom_frame = tk.Frame(self.paned, bg=BG)
        self.logs_box = tk.Text(self.bottom_frame, height=6, bg="#1b1b1b", fg="#dddddd", wrap="none")
        self.logs_box.configure(state="disabled")
        self.logs_box.pack(fill=tk.BOTH, expand=True, padx=10, pady=(0, 6))
        self.logs_box.pack_forget()  # hidden by default
        self.paned.add(self.bottom_frame, weight=0)

        def _keep_sash_collapsed(_event=None):
            """When Logs is unchecked, keep sash at bottom so window can resize down."""
            if not self.show_logs.get():
                self.paned.update_idletasks()
                total = self.paned.winfo_height()
                if total > 0:
                    self.paned.sashpos(0, total)

        self.paned.bind("<Configure>", _keep_sash_collapsed)

        # Style
        style = ttk.Style(self.root)
        style.theme_use("default")
        style.configure(
            "Treeview",
            background=FIELD_BG,
            foreground="#f0f0f0",
            fieldbackground=FIELD_BG,
            rowheight=24,
            font=("Segoe UI", 10),
        )
        style.configure(
            "Treeview.Heading",
            background=BG,
            foreground="#ffffff",
            font=("Segoe UI", 10, "bold"),
        )
        style.map("Treeview", background=[('selected', '#444')], foreground=[])

        self.notebook = ttk.Notebook(content_frame)
        self.notebook.grid(row=0, column=0, sticky="nsew", padx=10, pady=(10, 5))

        self.pipe_columns = ("id", "name", "length", "diameter", "repair")
        self.pipe_tree = self._build_tab(
            "Pipes",
            self.pipe_columns,
            {"id": "ID", "name": "Name", "length": "Length (km)", "diameter": "Diameter (mm)", "repair": "Under Repair"},
            "pipes",
            self._build_pipe_controls,
        )
        self.pipe_tree.tag_configure("red", foreground="#FF6A6A")
        self.pipe_tree.tag_configure("green", foreground="#7CFC00")

        self.station_columns = ("id", "name", "workshops", "unused", "classification")
        self.station_tree = self._build_tab(
            "Stations",
            self.station_columns,
            {"id": "ID", "name": "Name", "workshops": "Working/Total", "unused": "Unused", "classification": "Classification"},
            "stations",
            self._build_station_controls,
        )
        self.station_tree.tag_configure("orange", foreground="#FFA500")  # idle workshops
        self.station_tree.tag_configure("green", foreground="#7CFC00")

        # File buttons & toggles
        button_frame = tk.Frame(content_frame, bg=BG)
        button_frame.grid(row=1, column=0, sticky="ew", padx=10, pady=(0, 10))

        ttk.Button(button_frame, text="Save", command=self.save).pack(side=tk.LEFT, padx=5)
        ttk.Button(button_frame, text="Save As...", command=self.save_as).pack(side=tk.LEFT, padx=5)
        ttk.Button(button_frame, text="Load...", command=self.load).pack(side=tk.LEFT, padx=5)

        tk.Checkbutton(
            button_frame,
            text="Enable Notifications",
            variable=self.enable_notifications,
            fg="white",
            bg=BG,
            selectcolor=FIELD_BG,
            activebackground=BG,
            activeforeground="white",
        ).pack(side=tk.LEFT, padx=5)

        tk.Checkbutton(
            button_frame,
            text="Show Logs",
            variable=self.show_logs,
            fg="white",
            bg=BG,
            selectcolor=FIELD_BG,
            command=self.toggle_logs,
        ).pack(side=tk.LEFT, padx=5)

        self._add_action_buttons()
        self.audit.add_listener(self.on_audit)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        # Initial paint
        self.refresh_ui()

    # ---------- layout helpers ----------

    def _build_tab(
        self,
        title: str,
        columns: Tuple[str, ...],
        headers: dict,
        sort_key: str,
        build_controls: Callable[[tk.Frame], None],
    ) -> ttk.Treeview:
        tab = tk.Frame(self.notebook, bg=BG)
        tab.rowconfigure(1, weight=1)
        tab.columnconfigure(0, weight=1)
        self.notebook.add(tab, text=title)

        filter_frame = tk.Frame(tab, bg=BG)
        filter_frame.grid(row=0, column=0, sticky="ew", pady=(5, 5))

        tree = ttk.Treeview(tab, columns=columns, show="headings", selectmode="extended")
        tree.grid(row=1, column=0, sticky="nsew")
        for col in columns:
            tree.heading(col, text=headers[col], command=lambda c=col: self.sort_by_column(sort_key, c))
        tree.column("id", width=60, anchor="center")

        action_frame = tk.Frame(tab, bg=BG)
        action_frame.grid(row=2, column=0, sticky="ew", pady=(5, 0))

        build_controls(filter_frame)
        self._action_frames[sort_key] = action_frame
        return tree

    def _label(self, parent, text: str) -> tk.Label:
        return tk.Label(parent, text=text, fg="white", bg=BG)

    def _build_pipe_controls(self, filter_frame: tk.Frame) -> None:
        self._label(filter_frame, "Name contains").pack(side=tk.LEFT, padx=5)
        tk.Entry(filter_frame, textvariable=self.pipe_name_filter).pack(side=tk.LEFT, padx=5)
        self._label(filter_frame, "Repair").pack(side=tk.LEFT, padx=5)
        ttk.Combobox(
            filter_frame,
            textvariable=self.pipe_repair_filter,
            values=list(REPAIR_FILTER_OPTIONS),
            state="readonly",
            width=14,
        ).pack(side=tk.LEFT, padx=5)
        ttk.Button(filter_frame, text="Search", command=self.apply_pipe_search).pack(side=tk.LEFT, padx=5)
        ttk.Button(filter_frame, text="Clear", command=self.clear_pipe_filters).pack(side=tk.LEFT, padx=5)

    def _build_station_controls(self, filter_frame: tk.Frame) -> None:
        self._label(filter_frame, "Name contains").pack(side=tk.LEFT, padx=5)
        tk.Entry(filter_frame, textvariable=self.station_name_filter).pack(side=tk.LEFT, padx=5)
        self._label(filter_frame, "Min unused %").pack(side=tk.LEFT, padx=5)
        tk.Entry(filter_frame, textvariable=self.station_unused_filter, width=8).pack(side=tk.LEFT, padx=5)
        ttk.Button(filter_frame, text="Search", command=self.apply_station_search).pack(side=tk.LEFT, padx=5)
        ttk.Button(filter_frame, text="Clear", command=self.clear_station_filters).pack(side=tk.LEFT, padx=5)

    def _add_action_buttons(self) -> None:
        pipes_frame = self._action_frames["pipes"]
        ttk.Button(pipes_frame, text="Add Pipe", command=self.add_pipe).pack(side=tk.LEFT, padx=5)
        ttk.Button(pipes_frame, text="Delete", command=self.delete_pipes).pack(side=tk.LEFT, padx=5)
        ttk.Button(pipes_frame, text="Toggle Repair", command=self.toggle_selected_pipes).pack(side=tk.LEFT, padx=5)
        ttk.Button(pipes_frame, text="Batch: All Found", command=self.batch_toggle_found).pack(side=tk.LEFT, padx=5)
        ttk.Button(pipes_frame, text="Batch: By IDs...", command=self.batch_toggle_by_ids).pack(side=tk.LEFT, padx=5)

        stations_frame = self._action_frames["stations"]
        ttk.Button(stations_frame, text="Add Station", command=self.add_station).pack(side=tk.LEFT, padx=5)
        ttk.Button(stations_frame, text="Delete", command=self.delete_stations).pack(side=tk.LEFT, padx=5)
        ttk.Button(stations_frame, text="Start Workshop", command=lambda: self.change_workshops(True)).pack(side=tk.LEFT, padx=5)
        ttk.Button(stations_frame, text="Stop Workshop", command=lambda: self.change_workshops(False)).pack(side=tk.LEFT, padx=5)

    # ---------- audit hook ----------

    def on_audit(self, line: str) -> None:
        """AuditLog listener: append one stamped line to the Logs panel."""
        self._append_log(line + "\n")

    def on_close(self) -> None:
        """Detach from the audit log before the widgets are destroyed."""
        self.audit.remove_listener(self.on_audit)
        self.root.destroy()

    # ---------- UI callbacks & utilities ----------

    def toggle_logs(self) -> None:
        """Show logs in bottom pane. Resize pane to show/hide."""
        if self.show_logs.get():
            self.paned.pane(self.bottom_frame, weight=1)
            self.logs_box.pack(fill=tk.BOTH, expand=True, padx=10, pady=(0, 6))
            self.paned.update_idletasks()
            total = self.paned.winfo_height()
            if total > 0:
                self.paned.sashpos(0, int(total * 0.75))
        else:
            self.logs_box.pack_forget()
            self.paned.pane(self.bottom_frame, weight=0)
            self.paned.update_idletasks()
            total = self.paned.winfo_height()
            if total > 0:
                self.paned.sashpos(0, total)

    def clear_pipe_filters(self) -> None:
        self.pipe_name_filter.set("")
        self.pipe_repair_filter.set("Any")
        self.pipe_search = filters.PipeSearch()
        self.refresh_ui()

    def clear_station_filters(self) -> None:
        self.station_name_filter.set("")
        self.station_unused_filter.set("")
        self.station_search = filters.StationSearch()
        self.refresh_ui()

    def apply_pipe_search(self) -> None:
        self.pipe_search = filters.PipeSearch(
            name=self.pipe_name_filter.get(),
            under_repair=REPAIR_FILTER_OPTIONS.get(self.pipe_repair_filter.get()),
        )
        self.refresh_ui()

    def apply_station_search(self) -> None:
        """Capture station criteria; an invalid threshold keeps the previous search."""
        raw = self.station_unused_filter.get().strip()
        threshold = None
        if raw:
            try:
                threshold = parse_float(raw, 0.0, 100.0)
            except ValueError as e:
                messagebox.showerror("Station Search", str(e))
                return
        self.station_search = filters.StationSearch(name=self.station_name_filter.get(), min_unused=threshold)
        self.refresh_ui()

    def refresh_ui(self) -> None:
        """
        Purpose: Rebuild both tables from the repos, applying the last applied searches and sorting.
        Side effects: Mutates Treeview items (UI only).
        """
        self._found_pipes = self.pipe_search.run(self.pipes)
        pipe_rows = [
            (format_pipe_row(pipe_id, pipe), "red" if pipe.under_repair else "green")
            for pipe_id, pipe in self.pipes.list()
            if pipe_id in self._found_pipes
        ]
        self._repaint(self.pipe_tree, self.pipe_columns, "pipes", pipe_rows)

        found_stations = self.station_search.run(self.stations)
        station_rows = [
            (format_station_row(station_id, station), "orange" if station.unused_percentage > 0 else "green")
            for station_id, station in self.stations.list()
            if station_id in found_stations
        ]
        self._repaint(self.station_tree, self.station_columns, "stations", station_rows)

    def _repaint(self, tree: ttk.Treeview, columns: Tuple[str, ...], sort_key: str, rows: List[tuple]) -> None:
        col, order = self.sort_state[sort_key]["column"], self.sort_state[sort_key]["order"]
        if col:
            idx = columns.index(col)
            rows.sort(key=lambda r: _sort_value(r[0][idx]), reverse=(order == "desc"))
        tree.delete(*tree.get_children())
        for values, color in rows:
            tree.insert("", "end", iid=str(values[0]), values=values, tags=(color,))

    def sort_by_column(self, sort_key: str, col: str) -> None:
        """
        Purpose: Toggle header sort order and refresh.
        Inputs: sort_key ("pipes" or "stations"), col (column key).
        """
        state = self.sort_state[sort_key]
        order = "asc"
        if state["column"] == col and state["order"] == "asc":
            order = "desc"
        elif state["column"] == col and state["order"] == "desc":
            col, order = None, None  # reset sort
        state["column"] = col
        state["order"] = order
        self.refresh_ui()

    def _selected_ids(self, tree: ttk.Treeview) -> List[int]:
        return [int(iid) for iid in tree.selection()]

    # ---------- internal helper for Logs ----------

    def _append_log(self, text: str) -> None:
        """Append one line to the Logs panel and trim to LOG_MAX_LINES."""
        self.logs_box.configure(state="normal")
        self.logs_box.insert("end", text)
        self.logs_box.see("end")
        total_lines = int(self.logs_box.index("end-1c").split(".")[0])
        if total_lines > LOG_MAX_LINES:
            remove = total_lines - LOG_MAX_LINES
            self.logs_box.delete("1.0", f"{remove + 1}.0")
        self.logs_box.configure(state="disabled")

    def _notify(self, title: str, message: str) -> None:
        if not self.enable_notifications.get():
            return
        try:
            notification.notify(title=title, message=message, timeout=NOTIFICATION_TIMEOUT_SEC)
        except NotImplementedError:
            self._append_log(f"Notifications are not supported on this platform: {message}\n")

    # ---------- dialogs ----------

    def _form_dialog(
        self,
        title: str,
        fields: List[Tuple[str, str, Optional[list]]],
        on_save: Callable[[dict], Optional[str]],
    ) -> None:
        """
        Purpose: Small modal form. fields = [(key, label, combobox options or None)].
                 on_save gets {key: raw text} and returns an error message or None to close.
        """
        win = tk.Toplevel(self.root)
        win.title(title)
        win.configure(bg=BG)
        win.transient(self.root)

        values = {}
        for row, (key, label, options) in enumerate(fields):
            self._label(win, label).grid(row=row, column=0, sticky="e", padx=5, pady=5)
            var = tk.StringVar()
            if options is None:
                widget = tk.Entry(win, textvariable=var)
            else:
                widget = ttk.Combobox(win, textvariable=var, values=options)
            widget.grid(row=row, column=1, padx=5, pady=5)
            values[key] = var

        def save():
            error = on_save({key: var.get() for key, var in values.items()})
            if error:
                messagebox.showerror(title, error, parent=win)
                return
            win.destroy()
            self.refresh_ui()

        ttk.Button(win, text="Save", command=save).grid(row=len(fields), column=0, columnspan=2, pady=10)
        win.grab_set()

    def add_pipe(self) -> None:
        """Open a dialog to create a pipe (name, length, diameter, repair flag)."""

        def on_save(raw: dict) -> Optional[str]:
            try:
                length = parse_float(raw["length"], minimum=MIN_PIPE_LENGTH_KM)
                diameter = parse_int(raw["diameter"], minimum=MIN_PIPE_DIAMETER_MM)
            except ValueError as e:
                return str(e)
            under_repair = raw["repair"] == "Yes"
            self.pipes.create(Pipe(clean_text(raw["name"]), length, diameter, under_repair))
            return None

        self._form_dialog(
            "Add Pipe",
            [
                ("name", "Name", None),
                ("length", "Length (km)", None),
                ("diameter", "Diameter (mm)", None),
                ("repair", "Under repair", ["No", "Yes"]),
            ],
            on_save,
        )

    def add_station(self) -> None:
        """Open a dialog to create a compressor station."""

        def on_save(raw: dict) -> Optional[str]:
            try:
                total = parse_int(raw["total"], minimum=MIN_TOTAL_WORKSHOPS)
                working = parse_int(raw["working"], minimum=0, maximum=total)
            except ValueError as e:
                return str(e)
            self.stations.create(
                Station(clean_text(raw["name"]), total, working, clean_text(raw["classification"]))
            )
            return None

        self._form_dialog(
            "Add Station",
            [
                ("name", "Name", None),
                ("total", "Total workshops", None),
                ("working", "Working workshops", None),
                ("classification", "Classification", CLASSIFICATION_OPTIONS),
            ],
            on_save,
        )

    def _delete_selected(self, tree: ttk.Treeview, repo: Repo, title: str) -> None:
        ids = self._selected_ids(tree)
        if not ids:
            messagebox.showinfo(title, "Select at least one row to delete.")
            return
        if not messagebox.askyesno(title, f"Delete {len(ids)} {repo.kind.lower()}(s)? This cannot be undone."):
            return
        missing = [record_id for record_id in ids if not repo.delete(record_id)]
        if missing:
            messagebox.showerror(title, f"{repo.kind} ID={missing[0]} not found.")
        self.refresh_ui()

    def delete_pipes(self) -> None:
        self._delete_selected(self.pipe_tree, self.pipes, "Delete Pipe")

    def delete_stations(self) -> None:
        self._delete_selected(self.station_tree, self.stations, "Delete Station")

    def toggle_selected_pipes(self) -> None:
        ids = self._selected_ids(self.pipe_tree)
        if not ids:
            messagebox.showinfo("Toggle Repair", "Select a pipe first.")
            return
        for pipe_id in ids:
            if not batch.toggle_repair(self.pipes, pipe_id, self.audit):
                messagebox.showerror("Toggle Repair", f"Pipe ID={pipe_id} not found.")
        self.refresh_ui()

    def change_workshops(self, start: bool) -> None:
        """Start or stop one workshop on each selected station."""
        title = "Start Workshop" if start else "Stop Workshop"
        ids = self._selected_ids(self.station_tree)
        if not ids:
            messagebox.showinfo(title, "Select a station first.")
            return
        action = batch.start_workshop if start else batch.stop_workshop
        for station_id in ids:
            if not self.stations.exists(station_id):
                messagebox.showerror(title, f"Station ID={station_id} not found.")
            elif not action(self.stations, station_id, self.audit):
                reason = "All workshops are already running." if start else "No workshops are running."
                messagebox.showwarning(title, f"Station ID={station_id}: {reason}")
        self.refresh_ui()

    def batch_toggle_found(self) -> None:
        """Toggle repair on every pipe matched by the current search."""
        if not self._found_pipes:
            messagebox.showinfo("Batch Edit", "No pipes match the current filter.")
            return
        if not messagebox.askyesno("Batch Edit", f"Toggle repair status of all {len(self._found_pipes)} found pipes?"):
            return
        changed = batch.batch_toggle_repair(self.pipes, self._found_pipes, self.audit)
        self.refresh_ui()
        messagebox.showinfo("Batch Edit", f"Repair status changed for {changed} pipes.")

    def batch_toggle_by_ids(self) -> None:
        """Toggle repair on hand-picked ids, accepted only if they are in the current search result."""
        if not self._found_pipes:
            messagebox.showinfo("Batch Edit", "No pipes match the current filter.")
            return

        def on_save(raw: dict) -> Optional[str]:
            try:
                chosen = parse_id_list(raw["ids"])
            except ValueError as e:
                return str(e)
            accepted, rejected = batch.select_from(self._found_pipes, chosen)
            if rejected:
                return f"Not in search results: {', '.join(str(i) for i in sorted(rejected))}"
            if not accepted:
                return "Enter at least one pipe ID."
            batch.batch_toggle_repair(self.pipes, accepted, self.audit)
            return None

        self._form_dialog("Batch Edit", [("ids", "Pipe IDs (comma separated)", None)], on_save)

    # ---------- persistence ----------

    def save(self) -> None:
        self._save_to(self.data_path)

    def save_as(self) -> None:
        filename = filedialog.asksaveasfilename(
            parent=self.root,
            initialdir=str(self.data_path.parent),
            initialfile=self.data_path.name,
            defaultextension=".txt",
            filetypes=[("Network data", "*.txt"), ("All files", "*.*")],
        )
        if filename:
            self._save_to(Path(filename))

    def _save_to(self, path: Path) -> None:
        if self.pipes.count() == 0 and self.stations.count() == 0:
            messagebox.showinfo("Save", "Nothing to save: there are no pipes or stations.")
            return
        try:
            save_snapshot(self.pipes, self.stations, path, self.audit)
        except StorageError as e:
            messagebox.showerror("Save", f"Could not save data:\n{e}")
            return
        self.data_path = path
        self._notify("Data saved", f"Saved to {path.name}")

    def load(self) -> None:
        filename = filedialog.askopenfilename(
            parent=self.root,
            initialdir=str(self.data_path.parent),
            filetypes=[("Network data", "*.txt"), ("All files", "*.*")],
        )
        if not filename:
            return
        path = Path(filename)
        try:
            snapshot = load_into(path, self.pipes, self.stations, self.audit)
        except StorageError as e:
            messagebox.showerror("Load", f"Could not load data (nothing was changed):\n{e}")
            return
        self.data_path = path
        self.refresh_ui()
        self._notify("Data loaded", f"{len(snapshot.pipes)} pipes, {len(snapshot.stations)} stations")


def _sort_value(value):
    """Numeric-looking cells sort as numbers, the rest as lowercase text."""
    if isinstance(value, (int, float)):
        return (0, value, "")
    text = str(value).rstrip("%")
    try:
        return (0, float(text), "")
    except ValueError:
        return (1, 0, str(value).lower())
