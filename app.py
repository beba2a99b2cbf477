# app.py
# CustomTkinter GUI for contact search (dark theme).
# - Load contacts from a .json/.csv file OR a folder of them.
# - Background loading thread (keeps UI responsive).
# - Live search with debounce, optional column sort; results & event log panes.

from __future__ import annotations
import threading
from typing import Optional

import tkinter.filedialog as fd
import tkinter.messagebox as mb
import customtkinter as ctk

# Project imports (installed package, or PYTHONPATH=src)
from contact_web import initialize, search, shutdown
from contact_search.config import DEBOUNCE_MS, SORT_COMPARATORS
from contact_search.models import Contact, SortState
from contact_search.normalize import format_phone_number


# -------------------- small helpers --------------------

_HEADER = f"{'Name':<28} {'Email':<32} {'Phone':<16} Company"
_RELEVANCE = "relevance"

def shorten_path(p: str, max_chars: int = 60) -> str:
    """Shorten long paths neatly for labels."""
    if len(p) <= max_chars:
        return p
    keep = max_chars // 2 - 3
    return p[:keep] + "..." + p[-keep:]


# -------------------- main app --------------------

class ContactSearchApp(ctk.CTk):
    """Dark-themed GUI that loads contacts from a file or folder and searches them as you type."""

    def __init__(self) -> None:
        super().__init__()

        # Theme
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        # Window
        self.title("Contact Search")
        self.geometry("980x650")
        self.minsize(820, 560)

        # State
        self._loaded: bool = False
        self._loading_thread: Optional[threading.Thread] = None
        self._search_after_id: Optional[str] = None

        # Fonts
        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_label = ctk.CTkFont(size=13)
        self.font_mono = ctk.CTkFont(family="Cascadia Mono, Menlo, Consolas, Courier New", size=13)

        # Layout grid
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)  # results
        self.grid_rowconfigure(4, weight=0)  # log

        self._build_header()
        self._build_source_bar()
        self._build_search()
        self._build_results()
        self._build_log()

        self._set_status("Ready")
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        ctk.CTkLabel(header, text="Contact Search", font=self.font_title).grid(
            row=0, column=0, sticky="w", padx=12, pady=10
        )

    def _build_source_bar(self) -> None:
        bar = ctk.CTkFrame(self, corner_radius=10)
        bar.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        bar.grid_columnconfigure(2, weight=1)

        ctk.CTkButton(bar, text="Choose File", command=self._choose_file).grid(
            row=0, column=0, padx=(12, 6), pady=10
        )
        ctk.CTkButton(bar, text="Choose Folder", command=self._choose_folder).grid(
            row=0, column=1, padx=(0, 6), pady=10, sticky="w"
        )

        self.lbl_source = ctk.CTkLabel(bar, text="No source selected", anchor="w", font=self.font_label)
        self.lbl_source.grid(row=0, column=2, sticky="ew", padx=6, pady=10)

        self.progress = ctk.CTkProgressBar(bar, mode="indeterminate")
        self.progress.grid(row=0, column=3, sticky="e", padx=(0, 6), pady=10)

        self.lbl_status = ctk.CTkLabel(bar, text="Status: —", anchor="e")
        self.lbl_status.grid(row=0, column=4, sticky="e", padx=12, pady=10)

    def _build_search(self) -> None:
        box = ctk.CTkFrame(self, corner_radius=10)
        box.grid(row=2, column=0, sticky="ew", padx=12, pady=6)
        box.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(box, text="Search:", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=10
        )
        self.entry_query = ctk.CTkEntry(box, placeholder_text="Name, email, company or phone…")
        self.entry_query.grid(row=0, column=1, sticky="ew", padx=(6, 6), pady=10)
        self.entry_query.bind("<KeyRelease>", self._on_query_changed)

        # "relevance" = no column sort; rows keep search order (or A-Z by name)
        self.opt_sort = ctk.CTkOptionMenu(
            box, values=[_RELEVANCE, *SORT_COMPARATORS], width=130,
            command=lambda _v: self._do_search(),
        )
        self.opt_sort.set(_RELEVANCE)
        self.opt_sort.grid(row=0, column=2, padx=6, pady=10)
        self.sw_desc = ctk.CTkSwitch(box, text="desc", width=60, command=self._do_search)
        self.sw_desc.grid(row=0, column=3, padx=(6, 12), pady=10)

    def _build_results(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=6)
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(0, weight=1)

        self.txt_results = ctk.CTkTextbox(frame, wrap="none", font=self.font_mono)
        self.txt_results.grid(row=0, column=0, sticky="nsew", padx=12, pady=12)
        self.txt_results.configure(state="disabled")
        self._set_results("(load a contacts file to begin)")

    def _build_log(self) -> None:
        self.txt_log = ctk.CTkTextbox(self, height=110, wrap="word", font=ctk.CTkFont(size=12))
        self.txt_log.grid(row=4, column=0, sticky="nsew", padx=12, pady=(6, 12))
        self._log("GUI ready. Choose a contacts file or folder.")

    # --------- source selection ---------

    def _choose_file(self) -> None:
        path = fd.askopenfilename(
            title="Choose contacts file",
            filetypes=[("Contacts", "*.json *.csv"), ("All files", "*.*")],
        )
        if path:
            self._start_loading(path)

    def _choose_folder(self) -> None:
        path = fd.askdirectory(title="Choose contacts folder")
        if path:
            self._start_loading(path)

    # --------- loading (threaded) ---------

    def _start_loading(self, source: str) -> None:
        if self._loading_thread and self._loading_thread.is_alive():
            mb.showinfo("Loading", "Contacts are already loading. Please wait.")
            return

        self.lbl_source.configure(text=shorten_path(source))
        self._set_status("Loading…")
        self.progress.start()
        self._loaded = False

        self._loading_thread = threading.Thread(target=self._load_worker, args=(source,), daemon=True)
        self._loading_thread.start()

    def _load_worker(self, source: str) -> None:
        try:
            n = initialize([source])
        except Exception as exc:
            self.after(0, lambda: self._on_load_error(exc))
            return
        self.after(0, lambda: self._on_load_ok(n))

    def _on_load_ok(self, n: int) -> None:
        self.progress.stop()
        self._loaded = True
        self._set_status(f"Loaded {n:,} contacts.")
        self._log(f"Contacts ready ({n}).")
        self._do_search()
        self.entry_query.focus_set()

    def _on_load_error(self, exc: Exception) -> None:
        self.progress.stop()
        self._set_status("Error while loading contacts.")
        self._log(f"ERROR: {exc!r}")
        mb.showerror("Load error", "Failed to load contacts.\nSee event log for details.")

    # --------- search ---------

    def _on_query_changed(self, _ev=None) -> None:
        # debounce: only the last keystroke in a burst runs a search
        if self._search_after_id is not None:
            self.after_cancel(self._search_after_id)
        self._search_after_id = self.after(DEBOUNCE_MS, self._do_search)

    def _do_search(self) -> None:
        self._search_after_id = None
        if not self._loaded:
            self._set_results("error: please load contacts before searching.")
            return
        rows = search(self.entry_query.get(), sort=self._current_sort())
        if not rows:
            self._set_results("(no matches)")
            return
        self._set_results("\n".join([_HEADER, *(self._fmt(c) for c in rows)]))

    def _current_sort(self) -> Optional[SortState]:
        key = self.opt_sort.get()
        if key == _RELEVANCE:
            return None
        return SortState(key, "desc" if self.sw_desc.get() else "asc")

    @staticmethod
    def _fmt(c: Contact) -> str:
        return f"{c.name:<28} {c.email or '':<32} {format_phone_number(c.phone):<16} {c.company or ''}"

    # --------- misc UI helpers ---------

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    def _set_results(self, text: str) -> None:
        self.txt_results.configure(state="normal")
        self.txt_results.delete("0.0", "end")
        if text:
            self.txt_results.insert("end", text)
        self.txt_results.configure(state="disabled")

    def _log(self, msg: str) -> None:
        self.txt_log.insert("end", msg + "\n")
        self.txt_log.see("end")

    # --------- lifecycle ---------

    def _on_close(self) -> None:
        shutdown()
        self.destroy()


if __name__ == "__main__":
    app = ContactSearchApp()
    app.mainloop()
