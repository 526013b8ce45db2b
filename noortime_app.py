#!/usr/bin/env python3
"""
NoorTime Desktop Companion
Islamic pixel-art themed window with four views:
  - Today: location, Hijri date, the five prayers with done toggles and a
    countdown to the next one
  - Progress: prayers performed over the last seven recorded days
  - Qibla: bearing toward the Kaaba and a compass needle driven by heading
  - Guidance: AI-suggested dua, verse and habit based on recent history
"""

import argparse
import logging
import math
import sys
import threading
import tkinter as tk
from tkinter import messagebox

from noortime.location import (
    Coordinate,
    clear_manual_location,
    resolve_location,
    save_manual_location,
)
from noortime.prayer_api import PRAYER_METHODS, PRAYER_NAMES, SCHOOLS
from noortime.profile import ProfileStore
from noortime.qibla import compass_point
from noortime.session import Session

logger = logging.getLogger("noortime")

# ──────────────────────────────────────────────────────────────────────────────
# Theme constants
# ──────────────────────────────────────────────────────────────────────────────
BG_DARK = "#0d1117"
BG_CARD = "#161b22"
BG_HIGHLIGHT = "#1a3a2a"
BORDER_COLOR = "#2ea043"
ACCENT_GOLD = "#f0c040"
ACCENT_GREEN = "#3fb950"
TEXT_WHITE = "#e6edf3"
TEXT_DIM = "#8b949e"
TEXT_RED = "#ff6b6b"

FONT_PIXEL = ("Courier", 10, "bold")
FONT_PIXEL_SM = ("Courier", 8)
FONT_PIXEL_LG = ("Courier", 14, "bold")
FONT_TITLE = ("Courier", 12, "bold")
FONT_CLOCK = ("Courier", 22, "bold")
FONT_ARABIC = ("Arial", 14, "bold")

WINDOW_W = 480
WINDOW_H = 720

COMPASS_SIZE = 240

REFRESH_MS = 1000

TABS = ("today", "progress", "qibla", "guidance")

TYPE_ICONS = {"dua": "🤲", "verse": "📖", "habit": "🌱", "quote": "💬"}


def _fmt_countdown(seconds: int) -> str:
    """Format seconds into HH:MM:SS countdown string."""
    if seconds < 0:
        return "00:00:00"
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def setup_logging(debug: bool = False) -> None:
    """Log to stdout; DEBUG with --debug, INFO otherwise."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        ))
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)


# ──────────────────────────────────────────────────────────────────────────────
# Main App
# ──────────────────────────────────────────────────────────────────────────────
class NoorTimeApp:
    def __init__(self, root: tk.Tk, session: Session):
        self.root = root
        self.session = session
        self._active_tab = "today"
        self.tab_frames: dict = {}
        self.tab_buttons: dict = {}
        self.prayer_rows: dict = {}

        self._setup_window()
        self._build_ui()

        session.location.subscribe(
            lambda coord: self.root.after(0, self._on_location_changed, coord)
        )
        session.heading.subscribe(
            lambda heading: self.root.after(0, self._draw_compass)
        )

        self._start_data_load()

    # ──────────────────────────────────────────────────────────────────────
    # Window setup
    # ──────────────────────────────────────────────────────────────────────
    def _setup_window(self):
        root = self.root
        root.title("NoorTime")
        root.configure(bg=BG_DARK)
        root.resizable(False, False)

        screen_w = root.winfo_screenwidth()
        screen_h = root.winfo_screenheight()
        x = screen_w - WINDOW_W - 40
        y = (screen_h - WINDOW_H) // 2
        root.geometry(f"{WINDOW_W}x{WINDOW_H}+{x}+{y}")

    # ──────────────────────────────────────────────────────────────────────
    # UI construction
    # ──────────────────────────────────────────────────────────────────────
    def _build_ui(self):
        outer = tk.Frame(self.root, bg=BORDER_COLOR, bd=0)
        outer.pack(fill=tk.BOTH, expand=True, padx=2, pady=2)
        inner = tk.Frame(outer, bg=BG_DARK, bd=0)
        inner.pack(fill=tk.BOTH, expand=True, padx=1, pady=1)

        # ── header ────────────────────────────────────────────────────────
        header = tk.Frame(inner, bg=BG_CARD, height=36)
        header.pack(fill=tk.X, side=tk.TOP)
        header.pack_propagate(False)

        tk.Label(
            header,
            text="  ☀  NOORTIME  ◆  نور  ",
            font=FONT_PIXEL,
            fg=ACCENT_GOLD,
            bg=BG_CARD,
        ).pack(side=tk.LEFT, padx=6)

        tk.Button(
            header, text=" ⚙ ", font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_CARD,
            activeforeground=TEXT_WHITE, activebackground=BG_HIGHLIGHT,
            bd=0, cursor="hand2", command=self._show_settings_dialog,
        ).pack(side=tk.RIGHT, padx=4, pady=4)

        tk.Button(
            header, text="📍⟳", font=FONT_PIXEL_SM, fg=ACCENT_GREEN, bg=BG_CARD,
            activeforeground=TEXT_WHITE, activebackground=BG_HIGHLIGHT,
            bd=0, cursor="hand2", command=self._show_location_dialog,
        ).pack(side=tk.RIGHT, pady=4)

        self.lbl_location = tk.Label(
            inner, text="📍 Detecting location…", font=FONT_PIXEL, fg=TEXT_DIM, bg=BG_DARK,
        )
        self.lbl_location.pack(pady=(6, 0))

        # ── bottom navigation ─────────────────────────────────────────────
        nav = tk.Frame(inner, bg=BG_CARD)
        nav.pack(fill=tk.X, side=tk.BOTTOM)
        for tab, label in zip(TABS, ("🕌 Today", "📊 Progress", "🧭 Qibla", "✨ Guidance")):
            btn = tk.Button(
                nav, text=label, font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_CARD,
                activeforeground=TEXT_WHITE, activebackground=BG_HIGHLIGHT,
                bd=0, cursor="hand2", command=lambda t=tab: self._switch_tab(t),
            )
            btn.pack(side=tk.LEFT, expand=True, fill=tk.X, pady=6)
            self.tab_buttons[tab] = btn

        self._content = tk.Frame(inner, bg=BG_DARK)
        self._content.pack(fill=tk.BOTH, expand=True)

        self._build_today_tab()
        self._build_progress_tab()
        self._build_qibla_tab()
        self._build_guidance_tab()
        self._switch_tab("today")

    def _divider(self, parent):
        tk.Label(
            parent, text="◇ ─────────────────────────── ◇",
            font=("Courier", 9), fg=BORDER_COLOR, bg=BG_DARK,
        ).pack(pady=2)

    def _build_today_tab(self):
        frame = tk.Frame(self._content, bg=BG_DARK)
        self.tab_frames["today"] = frame

        self.lbl_greeting = tk.Label(
            frame, text="As-salamu alaykum", font=FONT_TITLE, fg=TEXT_WHITE, bg=BG_DARK,
        )
        self.lbl_greeting.pack(pady=(8, 0))

        self.lbl_hijri = tk.Label(frame, text="", font=FONT_PIXEL, fg=ACCENT_GOLD, bg=BG_DARK)
        self.lbl_hijri.pack()

        self.lbl_clock = tk.Label(
            frame, text="00:00:00", font=FONT_CLOCK, fg=ACCENT_GOLD, bg=BG_DARK, pady=4,
        )
        self.lbl_clock.pack()

        self._divider(frame)

        prayer_frame = tk.Frame(frame, bg=BG_DARK)
        prayer_frame.pack(fill=tk.X, padx=10, pady=4)
        for name in PRAYER_NAMES:
            row = tk.Frame(prayer_frame, bg=BG_CARD, pady=2)
            row.pack(fill=tk.X, pady=1)

            btn_done = tk.Button(
                row, text="○", font=FONT_PIXEL_LG, fg=TEXT_DIM, bg=BG_CARD,
                activebackground=BG_HIGHLIGHT, bd=0, cursor="hand2", width=2,
                command=lambda n=name: self._toggle_prayer(n),
            )
            btn_done.pack(side=tk.LEFT, padx=4)

            lbl_name = tk.Label(
                row, text=name, font=FONT_PIXEL, fg=TEXT_WHITE, bg=BG_CARD, anchor="w", width=18,
            )
            lbl_name.pack(side=tk.LEFT, padx=4)

            lbl_time = tk.Label(
                row, text="--:--", font=FONT_PIXEL_LG, fg=TEXT_WHITE, bg=BG_CARD, anchor="e", width=8,
            )
            lbl_time.pack(side=tk.RIGHT, padx=4)

            self.prayer_rows[name] = {
                "row": row,
                "btn_done": btn_done,
                "lbl_name": lbl_name,
                "lbl_time": lbl_time,
            }

        self._divider(frame)

        tk.Label(frame, text="NEXT PRAYER", font=FONT_PIXEL, fg=TEXT_DIM, bg=BG_DARK).pack()
        self.lbl_next_name = tk.Label(frame, text="—", font=FONT_PIXEL_LG, fg=ACCENT_GREEN, bg=BG_DARK)
        self.lbl_next_name.pack()
        self.lbl_countdown = tk.Label(frame, text="--:--:--", font=FONT_CLOCK, fg=ACCENT_GOLD, bg=BG_DARK)
        self.lbl_countdown.pack()

        tip = tk.Frame(frame, bg=BG_HIGHLIGHT, cursor="hand2")
        tip.pack(fill=tk.X, padx=14, pady=8)
        self.lbl_insight_title = tk.Label(
            tip, text="✨ Personalized insight  ›", font=FONT_PIXEL, fg=ACCENT_GOLD,
            bg=BG_HIGHLIGHT, anchor="w", pady=4,
        )
        self.lbl_insight_title.pack(fill=tk.X, padx=6)
        self.lbl_insight_body = tk.Label(
            tip, text="Open guidance for a dua, a verse and a habit for today.",
            font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_HIGHLIGHT, anchor="w",
            wraplength=420, justify=tk.LEFT, pady=4,
        )
        self.lbl_insight_body.pack(fill=tk.X, padx=6)
        for widget in (tip, self.lbl_insight_title, self.lbl_insight_body):
            widget.bind("<Button-1>", lambda _event: self._switch_tab("guidance"))

    def _build_progress_tab(self):
        frame = tk.Frame(self._content, bg=BG_DARK)
        self.tab_frames["progress"] = frame

        tk.Label(frame, text="CONSISTENCY", font=FONT_TITLE, fg=ACCENT_GOLD, bg=BG_DARK).pack(pady=(12, 0))
        tk.Label(
            frame, text="Prayers performed, last 7 days", font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_DARK,
        ).pack()
        self.lbl_today_count = tk.Label(frame, text="0 / 5 today", font=FONT_PIXEL_LG, fg=ACCENT_GREEN, bg=BG_DARK)
        self.lbl_today_count.pack(pady=6)
        self._divider(frame)
        self.progress_list = tk.Frame(frame, bg=BG_DARK)
        self.progress_list.pack(fill=tk.X, padx=14)

        self._divider(frame)
        tk.Label(frame, text="HISTORY", font=FONT_TITLE, fg=ACCENT_GOLD, bg=BG_DARK).pack()
        tk.Label(
            frame, text="  ".join(name[:3] for name in PRAYER_NAMES), font=FONT_PIXEL_SM,
            fg=TEXT_DIM, bg=BG_DARK, anchor="e",
        ).pack(fill=tk.X, padx=14)
        self.history_list = tk.Frame(frame, bg=BG_DARK)
        self.history_list.pack(fill=tk.X, padx=14)

    def _build_qibla_tab(self):
        frame = tk.Frame(self._content, bg=BG_DARK)
        self.tab_frames["qibla"] = frame

        tk.Label(frame, text="QIBLA DIRECTION", font=FONT_TITLE, fg=ACCENT_GOLD, bg=BG_DARK).pack(pady=(12, 0))
        tk.Label(
            frame, text="Turn until the needle points up", font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_DARK,
        ).pack()

        self.compass = tk.Canvas(
            frame, width=COMPASS_SIZE, height=COMPASS_SIZE, bg=BG_DARK, highlightthickness=0,
        )
        self.compass.pack(pady=10)

        self.lbl_bearing = tk.Label(frame, text="—°", font=FONT_CLOCK, fg=ACCENT_GOLD, bg=BG_DARK)
        self.lbl_bearing.pack()
        tk.Label(frame, text="BEARING FROM NORTH", font=FONT_PIXEL_SM, fg=ACCENT_GREEN, bg=BG_DARK).pack()

        # No orientation sensor on the desktop; the slider stands in for one
        tk.Label(frame, text="Device heading", font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_DARK).pack(pady=(12, 0))
        tk.Scale(
            frame, from_=0, to=359, orient=tk.HORIZONTAL, length=280,
            bg=BG_DARK, fg=TEXT_WHITE, troughcolor=BG_CARD, highlightthickness=0,
            command=lambda value: self.session.heading.publish(float(value)),
        ).pack()

    def _build_guidance_tab(self):
        frame = tk.Frame(self._content, bg=BG_DARK)
        self.tab_frames["guidance"] = frame

        top = tk.Frame(frame, bg=BG_DARK)
        top.pack(fill=tk.X, padx=14, pady=(12, 4))
        tk.Label(top, text="NOOR AI GUIDANCE", font=FONT_TITLE, fg=ACCENT_GOLD, bg=BG_DARK).pack(side=tk.LEFT)
        tk.Button(
            top, text=" ⟳ ", font=FONT_PIXEL, fg=ACCENT_GREEN, bg=BG_DARK,
            activebackground=BG_HIGHLIGHT, bd=0, cursor="hand2", command=self._load_guidance,
        ).pack(side=tk.RIGHT)

        self.lbl_guidance_status = tk.Label(frame, text="", font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_DARK)
        self.lbl_guidance_status.pack()
        self.guidance_list = tk.Frame(frame, bg=BG_DARK)
        self.guidance_list.pack(fill=tk.BOTH, expand=True, padx=10)

    # ──────────────────────────────────────────────────────────────────────
    # Navigation
    # ──────────────────────────────────────────────────────────────────────
    def _switch_tab(self, tab: str):
        self.tab_frames[self._active_tab].pack_forget()
        self._active_tab = tab
        self.tab_frames[tab].pack(fill=tk.BOTH, expand=True)
        for name, btn in self.tab_buttons.items():
            btn.config(fg=ACCENT_GOLD if name == tab else TEXT_DIM)

        if tab == "progress":
            self._render_progress()
        elif tab == "qibla":
            self._draw_compass()
        elif tab == "guidance":
            self._render_guidance()
            if self.session.wants_guidance():
                self._load_guidance()

    # ──────────────────────────────────────────────────────────────────────
    # Background work
    # ──────────────────────────────────────────────────────────────────────
    def _in_background(self, work, on_done=None):
        """Run work() on a daemon thread and hand its result to on_done in the Tk thread."""
        def runner():
            try:
                result = work()
            except Exception:
                logger.exception("Background task %s failed", getattr(work, "__name__", work))
                return
            if on_done is not None:
                self.root.after(0, on_done, result)

        threading.Thread(target=runner, daemon=True).start()

    def _start_data_load(self):
        self._render_today()
        self._in_background(lambda: self.session.set_location(resolve_location()))
        self._tick()

    def _on_location_changed(self, coord: Coordinate):
        self.lbl_location.config(text=f"📍 {coord.label}", fg=ACCENT_GREEN)
        self._draw_compass()
        self._refresh_schedule()

    def _refresh_schedule(self):
        self._in_background(self.session.refresh_schedule, lambda _result: self._render_schedule())

    def _render_schedule(self):
        schedule = self.session.schedule
        if not schedule:
            for widgets in self.prayer_rows.values():
                widgets["lbl_time"].config(text="--:--")
            self.lbl_hijri.config(text="☪  Prayer times unavailable", fg=TEXT_RED)
            return

        for name, widgets in self.prayer_rows.items():
            widgets["lbl_time"].config(text=schedule["timings"].get(name, "--:--"))
        hijri = schedule["hijri"]
        self.lbl_hijri.config(
            text=f"☪  {hijri['day']} {hijri['month_name']} {hijri['year']} H", fg=ACCENT_GOLD,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Today / progress
    # ──────────────────────────────────────────────────────────────────────
    def _toggle_prayer(self, name: str):
        self.session.toggle_prayer(name)
        self._render_today()

    def _render_today(self):
        self.lbl_greeting.config(text=f"As-salamu alaykum, {self.session.profile.name}")
        progress = self.session.today_progress()
        for name, widgets in self.prayer_rows.items():
            done = progress.prayers.get(name, False)
            widgets["btn_done"].config(
                text="✓" if done else "○",
                fg=ACCENT_GREEN if done else TEXT_DIM,
            )

    def _render_progress(self):
        for child in self.progress_list.winfo_children() + self.history_list.winfo_children():
            child.destroy()

        self.lbl_today_count.config(text=f"{self.session.today_progress().count} / 5 today")
        counts = self.session.profile.history.weekly_counts()
        if not counts:
            tk.Label(
                self.progress_list, text="Nothing recorded yet", font=FONT_PIXEL, fg=TEXT_DIM, bg=BG_DARK,
            ).pack(pady=10)
            return

        for record in self.session.recent_days(5):
            row = tk.Frame(self.history_list, bg=BG_CARD)
            row.pack(fill=tk.X, pady=1)
            tk.Label(row, text=record.date, font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD, anchor="w").pack(side=tk.LEFT, padx=4)
            marks = "    ".join("●" if record.prayers.get(name) else "○" for name in PRAYER_NAMES)
            tk.Label(row, text=marks, font=FONT_PIXEL, fg=ACCENT_GREEN, bg=BG_CARD).pack(side=tk.RIGHT, padx=8)

        for day, count in counts:
            row = tk.Frame(self.progress_list, bg=BG_DARK)
            row.pack(fill=tk.X, pady=2)
            tk.Label(row, text=day[:10], font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_DARK, width=12, anchor="w").pack(side=tk.LEFT)
            tk.Label(
                row, text="■" * count + "□" * (5 - count), font=FONT_PIXEL_LG,
                fg=ACCENT_GREEN if count == 5 else ACCENT_GOLD, bg=BG_DARK,
            ).pack(side=tk.LEFT, padx=6)
            tk.Label(row, text=f"{count}/5", font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_DARK).pack(side=tk.RIGHT)

    # ──────────────────────────────────────────────────────────────────────
    # Qibla compass
    # ──────────────────────────────────────────────────────────────────────
    def _draw_compass(self):
        canvas = self.compass
        canvas.delete("all")
        c = COMPASS_SIZE / 2
        r = c - 10
        canvas.create_oval(c - r, c - r, c + r, c + r, outline=BORDER_COLOR, width=3)

        heading = self.session.heading.value or 0.0
        for deg, label in ((0, "N"), (90, "E"), (180, "S"), (270, "W")):
            a = math.radians(deg - heading)
            canvas.create_text(
                c + (r - 14) * math.sin(a), c - (r - 14) * math.cos(a),
                text=label, fill=TEXT_DIM, font=FONT_PIXEL_SM,
            )

        bearing = self.session.qibla_bearing()
        pointer = self.session.qibla_pointer()
        if bearing is None or pointer is None:
            self.lbl_bearing.config(text="—°")
            return

        a = math.radians(pointer)
        canvas.create_line(
            c, c, c + (r - 30) * math.sin(a), c - (r - 30) * math.cos(a),
            fill=ACCENT_GOLD, width=5, arrow=tk.LAST,
        )
        canvas.create_oval(c - 6, c - 6, c + 6, c + 6, fill=ACCENT_GREEN, outline="")
        self.lbl_bearing.config(text=f"{round(bearing)}° {compass_point(bearing)}")

    # ──────────────────────────────────────────────────────────────────────
    # Guidance
    # ──────────────────────────────────────────────────────────────────────
    def _load_guidance(self):
        if self.session.guidance_busy:
            return
        self.lbl_guidance_status.config(text="NoorAI is reflecting…", fg=ACCENT_GOLD)
        self._in_background(self.session.load_guidance, lambda _result: self._render_guidance())

    def _render_insight(self):
        rec = self.session.insight()
        if rec is None:
            self.lbl_insight_title.config(text="✨ Personalized insight  ›")
            self.lbl_insight_body.config(text="Open guidance for a dua, a verse and a habit for today.")
            return
        self.lbl_insight_title.config(text=f"✨ {rec.title}  ›")
        self.lbl_insight_body.config(text=rec.content)

    def _render_guidance(self):
        self._render_insight()
        for child in self.guidance_list.winfo_children():
            child.destroy()

        recommendations = self.session.recommendations
        if self.session.guidance_busy:
            return
        if not recommendations:
            self.lbl_guidance_status.config(
                text="No guidance yet. Press ⟳ to ask again.", fg=TEXT_DIM,
            )
            return

        self.lbl_guidance_status.config(text="")
        for rec in recommendations:
            card = tk.Frame(self.guidance_list, bg=BG_CARD, bd=1, relief=tk.RIDGE)
            card.pack(fill=tk.X, pady=4)
            tk.Label(
                card, text=f"{TYPE_ICONS.get(rec.type, '•')}  {rec.title}", font=FONT_PIXEL,
                fg=ACCENT_GOLD, bg=BG_CARD, anchor="w", wraplength=420, justify=tk.LEFT,
            ).pack(fill=tk.X, padx=6, pady=(4, 0))
            if rec.arabic:
                tk.Label(
                    card, text=rec.arabic, font=FONT_ARABIC, fg=TEXT_WHITE, bg=BG_CARD,
                    wraplength=420, justify=tk.RIGHT,
                ).pack(fill=tk.X, padx=6)
            body = rec.translation or rec.content
            tk.Label(
                card, text=body, font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD,
                wraplength=420, justify=tk.LEFT, anchor="w",
            ).pack(fill=tk.X, padx=6)
            if rec.source:
                tk.Label(
                    card, text=f"— {rec.source}", font=FONT_PIXEL_SM, fg=TEXT_DIM, bg=BG_CARD, anchor="e",
                ).pack(fill=tk.X, padx=6)
            tk.Label(
                card, text=f"Why: {rec.reasoning}", font=FONT_PIXEL_SM, fg=ACCENT_GREEN, bg=BG_CARD,
                wraplength=420, justify=tk.LEFT, anchor="w",
            ).pack(fill=tk.X, padx=6, pady=(0, 4))

    # ──────────────────────────────────────────────────────────────────────
    # Live clock + countdown tick
    # ──────────────────────────────────────────────────────────────────────
    def _tick(self):
        """Called every second to update the clock, countdown and highlight."""
        try:
            now = self.session.current_time()
            self.lbl_clock.config(text=now.strftime("%H:%M:%S"))
            if self.session.day_changed():
                logger.info("New day %s, refreshing", self.session.today_key())
                self._render_today()
                if self._active_tab == "progress":
                    self._render_progress()
                self._refresh_schedule()
            self._update_countdown()
        except Exception:
            logger.exception("Clock tick failed")

        self.root.after(REFRESH_MS, self._tick)

    def _update_countdown(self):
        countdown = self.session.next_prayer_countdown()
        if countdown is None:
            self.lbl_next_name.config(text="—")
            self.lbl_countdown.config(text="--:--:--")
            next_name = None
        else:
            next_name, secs = countdown
            self.lbl_next_name.config(text=next_name)
            self.lbl_countdown.config(
                text=_fmt_countdown(secs), fg=TEXT_RED if secs < 300 else ACCENT_GOLD,
            )

        for name, widgets in self.prayer_rows.items():
            row_bg = BG_HIGHLIGHT if name == next_name else BG_CARD
            for key in ("row", "btn_done", "lbl_name", "lbl_time"):
                widgets[key].config(bg=row_bg)

    # ──────────────────────────────────────────────────────────────────────
    # Settings dialog
    # ──────────────────────────────────────────────────────────────────────
    def _show_settings_dialog(self):
        profile = self.session.profile
        dlg = tk.Toplevel(self.root)
        dlg.title("Settings")
        dlg.configure(bg=BG_DARK)
        dlg.geometry("400x360")
        dlg.resizable(False, False)
        dlg.transient(self.root)
        dlg.grab_set()

        tk.Label(dlg, text="⚙ Settings", font=FONT_TITLE, fg=ACCENT_GOLD, bg=BG_DARK).pack(pady=(10, 6))

        fields = tk.Frame(dlg, bg=BG_DARK)
        fields.pack(fill=tk.X, padx=20)

        tk.Label(fields, text="Name:", font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_DARK, anchor="w").grid(row=0, column=0, sticky="w", pady=4)
        ent_name = tk.Entry(fields, font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD, insertbackground=TEXT_WHITE, relief=tk.FLAT)
        ent_name.insert(0, profile.name)
        ent_name.grid(row=0, column=1, sticky="ew", pady=4, padx=(4, 0))

        method_labels = {label: method_id for method_id, label in PRAYER_METHODS.items()}
        method_var = tk.StringVar(value=PRAYER_METHODS.get(profile.calculation_method, ""))
        tk.Label(fields, text="Method:", font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_DARK, anchor="w").grid(row=1, column=0, sticky="w", pady=4)
        menu = tk.OptionMenu(fields, method_var, *method_labels)
        menu.config(font=FONT_PIXEL_SM, bg=BG_CARD, fg=TEXT_WHITE, highlightthickness=0)
        menu.grid(row=1, column=1, sticky="ew", pady=4, padx=(4, 0))

        school_var = tk.IntVar(value=profile.school)
        tk.Label(fields, text="Asr school:", font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_DARK, anchor="w").grid(row=2, column=0, sticky="nw", pady=4)
        school_frame = tk.Frame(fields, bg=BG_DARK)
        school_frame.grid(row=2, column=1, sticky="w", padx=(4, 0))
        for school_id, label in SCHOOLS.items():
            tk.Radiobutton(
                school_frame, text=label, variable=school_var, value=school_id, font=FONT_PIXEL_SM,
                fg=TEXT_WHITE, bg=BG_DARK, selectcolor=BG_CARD, activebackground=BG_DARK,
            ).pack(anchor="w")

        notify_var = tk.BooleanVar(value=profile.notifications_enabled)
        tk.Checkbutton(
            fields, text="Prayer reminders", variable=notify_var, font=FONT_PIXEL_SM,
            fg=TEXT_WHITE, bg=BG_DARK, selectcolor=BG_CARD, activebackground=BG_DARK,
        ).grid(row=3, column=1, sticky="w", pady=4, padx=(4, 0))

        fields.columnconfigure(1, weight=1)

        def _apply():
            changed = self.session.update_settings(
                name=ent_name.get(),
                calculation_method=method_labels.get(method_var.get(), profile.calculation_method),
                school=school_var.get(),
                notifications_enabled=notify_var.get(),
            )
            dlg.destroy()
            self._render_today()
            if changed:
                self._refresh_schedule()

        btn_frame = tk.Frame(dlg, bg=BG_DARK)
        btn_frame.pack(pady=10)
        tk.Button(
            btn_frame, text="  Save  ", font=FONT_PIXEL_SM, fg=BG_DARK, bg=ACCENT_GREEN,
            activebackground=BORDER_COLOR, bd=0, cursor="hand2", command=_apply,
        ).pack(side=tk.LEFT, padx=6)
        tk.Button(
            btn_frame, text="  Cancel  ", font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD,
            activebackground=BG_HIGHLIGHT, bd=0, cursor="hand2", command=dlg.destroy,
        ).pack(side=tk.LEFT, padx=6)

    # ──────────────────────────────────────────────────────────────────────
    # Location dialog
    # ──────────────────────────────────────────────────────────────────────
    def _show_location_dialog(self):
        """Show a dialog to set or refresh location."""
        dlg = tk.Toplevel(self.root)
        dlg.title("Set Location")
        dlg.configure(bg=BG_DARK)
        dlg.geometry("380x260")
        dlg.resizable(False, False)
        dlg.transient(self.root)
        dlg.grab_set()

        tk.Label(dlg, text="📍 Set Location", font=FONT_TITLE, fg=ACCENT_GOLD, bg=BG_DARK).pack(pady=(10, 6))

        fields_frame = tk.Frame(dlg, bg=BG_DARK)
        fields_frame.pack(fill=tk.X, padx=20, pady=4)

        current = self.session.location.value
        labels = ["Place:", "Latitude:", "Longitude:", "Timezone:"]
        keys = ["name", "latitude", "longitude", "timezone"]
        entries = {}
        for i, (label, key) in enumerate(zip(labels, keys)):
            tk.Label(
                fields_frame, text=label, font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_DARK, anchor="w", width=10,
            ).grid(row=i, column=0, sticky="w", pady=2)
            ent = tk.Entry(
                fields_frame, font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD,
                insertbackground=TEXT_WHITE, width=28, relief=tk.FLAT,
            )
            ent.grid(row=i, column=1, sticky="ew", pady=2, padx=(4, 0))
            value = getattr(current, key, None) if current else None
            if value is not None:
                ent.insert(0, str(value))
            entries[key] = ent
        fields_frame.columnconfigure(1, weight=1)

        def _apply():
            try:
                coord = Coordinate(
                    latitude=float(entries["latitude"].get().strip()),
                    longitude=float(entries["longitude"].get().strip()),
                    name=entries["name"].get().strip() or None,
                    timezone=entries["timezone"].get().strip() or None,
                )
            except ValueError:
                messagebox.showerror("Invalid input", "Latitude and Longitude must be numbers.", parent=dlg)
                return
            save_manual_location(coord)
            dlg.destroy()
            self.session.set_location(coord)

        def _refresh_ip():
            clear_manual_location()
            dlg.destroy()
            self.lbl_location.config(text="📍 Refreshing location…", fg=TEXT_DIM)
            self._in_background(lambda: self.session.set_location(resolve_location()))

        btn_frame = tk.Frame(dlg, bg=BG_DARK)
        btn_frame.pack(pady=10)
        tk.Button(
            btn_frame, text="  Save  ", font=FONT_PIXEL_SM, fg=BG_DARK, bg=ACCENT_GREEN,
            activebackground=BORDER_COLOR, bd=0, cursor="hand2", command=_apply,
        ).pack(side=tk.LEFT, padx=6)
        tk.Button(
            btn_frame, text="  Refresh from IP  ", font=FONT_PIXEL_SM, fg=BG_DARK, bg=ACCENT_GOLD,
            activebackground="#c0a030", bd=0, cursor="hand2", command=_refresh_ip,
        ).pack(side=tk.LEFT, padx=6)
        tk.Button(
            btn_frame, text="  Cancel  ", font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD,
            activebackground=BG_HIGHLIGHT, bd=0, cursor="hand2", command=dlg.destroy,
        ).pack(side=tk.LEFT, padx=6)


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────
def main(argv=None):
    parser = argparse.ArgumentParser(description="NoorTime prayer companion")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--store", help="path to the profile store (default: ~/.noortime/store.json)")
    args = parser.parse_args(argv)

    setup_logging(args.debug)
    session = Session(store=ProfileStore(args.store))

    root = tk.Tk()
    NoorTimeApp(root, session)
    root.mainloop()


if __name__ == "__main__":
    main()
