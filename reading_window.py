# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk, font
import traceback # For detailed error logging

from pacing import step_wpm, WPM_STEP
from pacing_clock import PacingClock
from config import MIN_TEXT_SIZE, MAX_TEXT_SIZE, TEXT_SIZE_STEP
from utils import calculate_orp_index, format_time_remaining

# --- Dark Mode Colors ---
DARK_BG = "#171717"; DARK_FG = "#D4D4D4"; DARK_HIGHLIGHT = "#EF4444"
DARK_STATUS_BG = "#262626"; DARK_STATUS_FG = "#A3A3A3"
DARK_PROGRESS_TROUGH = "#262626"; DARK_PROGRESS_BAR = "#B45309"

# --- Constants ---
ORP_SIDE_CHARS = 10 # Width (in chars) reserved left and right of the ORP letter


class ReadingWindow(tk.Toplevel):
    """
    RSVP window: one word at a time, ORP letter fixed at the centre,
    pace driven by a PacingClock that runs on this window's event loop.
    """
    def __init__(self, parent, config_manager, on_close_callback=None):
        super().__init__(parent)
        self.parent = parent
        self.config = config_manager
        self.on_close_callback = on_close_callback
        self.widget_font = None
        self.font_color = DARK_FG
        self.highlight_color = DARK_HIGHLIGHT

        self.clock = PacingClock(
            self, base_wpm=self.config.get("wpm"), ramp_config=self.config.get_ramp_config(),
            on_advance=self._on_advance, on_state_change=self._on_state_change,
            on_rate_change=self._on_rate_change)

        self.title("Speed Reader")
        self.protocol("WM_DELETE_WINDOW", self.close_window)

        # --- Window Geometry ---
        screen_width = self.winfo_screenwidth(); screen_height = self.winfo_screenheight()
        width = int(screen_width * 0.7); height = max(300, int(screen_height * 0.45))
        x = (screen_width - width) // 2; y = max(0, (screen_height - height) // 2)
        self.geometry(f"{width}x{height}+{x}+{y}")

        # --- Main Frame ---
        self.main_frame = tk.Frame(self); self.main_frame.pack(expand=True, fill="both")
        self.main_frame.grid_rowconfigure(0, weight=1) # Canvas row expands vertically
        self.main_frame.grid_rowconfigure(1, weight=0) # Progress bar row takes needed height
        self.main_frame.grid_columnconfigure(0, weight=1)

        # --- Word Display Canvas ---
        self.word_display_canvas = tk.Canvas(self.main_frame, bd=0, highlightthickness=0)
        self.word_display_canvas.grid(row=0, column=0, sticky="nsew", padx=50, pady=(50, 5))
        self.word_display_canvas.bind("<Configure>", lambda e: self.display_word())

        # --- Progress Bar ---
        self.progress_var = tk.DoubleVar(); self.progress_style = ttk.Style(self)
        self.progress_bar = ttk.Progressbar(self.main_frame, orient="horizontal", mode="determinate", variable=self.progress_var, style="custom.Horizontal.TProgressbar")
        self.progress_bar.grid(row=1, column=0, sticky="ew", padx=50, pady=(0, 10))

        # --- Status Bar ---
        self.status_bar_frame = tk.Frame(self); self.status_bar_frame.pack(side="bottom", fill="x")
        left_status_frame = ttk.Frame(self.status_bar_frame); left_status_frame.pack(side="left", padx=10)
        self.play_button = ttk.Button(left_status_frame, text="Start", command=self.toggle_pause, width=8); self.play_button.pack(side="left", padx=(0, 10))
        self.restart_button = ttk.Button(left_status_frame, text="Neustart", command=self.restart_reading, width=8); self.restart_button.pack(side="left", padx=(0, 10))
        self.status_label_left = ttk.Label(left_status_frame, text="", anchor="w"); self.status_label_left.pack(side="left")
        self.status_label_right = ttk.Label(self.status_bar_frame, text="", anchor="e"); self.status_label_right.pack(side="right", padx=10)
        self.status_label_center = ttk.Label(self.status_bar_frame, text="", anchor="center"); self.status_label_center.pack(side="right", padx=10)

        # --- Keyboard Bindings ---
        self.bind("<space>", self.toggle_pause)
        self.bind("<Escape>", self.close_window)
        self.bind("<Right>", self.increase_speed)
        self.bind("<Left>", self.decrease_speed)
        self.bind("<Up>", self.increase_text_size)
        self.bind("<Down>", self.decrease_text_size)
        self.bind("<r>", self.restart_reading)

        self.update_display_settings()
        self.focus_set()

    # --- Settings / theme ---
    def update_display_settings(self):
        """Applies font, color, theme and pacing settings from the config."""
        is_dark = self.config.get("dark_mode")
        bg_color = DARK_BG if is_dark else self.config.get("background_color")
        self.font_color = DARK_FG if is_dark else self.config.get("font_color")
        self.highlight_color = self.config.get("highlight_color") or DARK_HIGHLIGHT
        status_bg = DARK_STATUS_BG if is_dark else "lightgrey"; status_fg = DARK_STATUS_FG if is_dark else "black"
        prog_trough = DARK_PROGRESS_TROUGH if is_dark else 'lightgrey'; prog_bar = DARK_PROGRESS_BAR if is_dark else 'blue'

        self.configure(bg=bg_color); self.main_frame.configure(bg=bg_color); self.word_display_canvas.configure(bg=bg_color)
        try: self.widget_font = font.Font(family=self.config.get("font_family"), size=-self.config.get("text_size"))
        except tk.TclError as e:
            print(f"Error setting font: {e}. Using default.")
            self.widget_font = font.nametofont("TkFixedFont")

        self.status_bar_frame.configure(bg=status_bg)
        self.progress_style.configure("Status.TLabel", background=status_bg, foreground=status_fg)
        self.progress_style.configure("Status.TFrame", background=status_bg)
        for label in (self.status_label_left, self.status_label_center, self.status_label_right): label.configure(style="Status.TLabel")
        try: self.status_label_left.master.configure(style="Status.TFrame")
        except tk.TclError: pass
        self.progress_style.configure("custom.Horizontal.TProgressbar", troughcolor=prog_trough, background=prog_bar)

        # Pacing inputs are handed over by value
        self.clock.set_base_wpm(self.config.get("wpm"))
        self.clock.set_ramp_config(self.config.get_ramp_config())
        self.display_word(); self.update_status_bar()

    # --- Text ---
    def start_reading(self, text):
        """Loads a new text; the reader waits paused on the first word."""
        self.clock.set_text(text)
        if not self.clock.word_count: print("No words found in text.")
        self.progress_bar.config(maximum=max(1, self.clock.word_count))
        self.update_progress(); self.update_status_bar()

    def restart_reading(self, event=None):
        """Rewinds to the first word and pauses."""
        print("Restarting reading...")
        self.clock.restart()

    # --- Clock callbacks ---
    def _on_advance(self, index, word):
        self.display_word(); self.update_progress(); self.update_status_bar()

    def _on_state_change(self, is_playing):
        try: self.play_button.config(text="Pause" if is_playing else "Start")
        except tk.TclError: pass
        self.update_status_bar()

    def _on_rate_change(self, wpm):
        self.update_status_bar()

    # --- Drawing ---
    def display_word(self):
        """Draws the current word with its ORP letter on the centre point."""
        word = self.clock.current_word
        canvas = self.word_display_canvas; canvas.delete("all")
        if not word: return
        if not self.widget_font: self.widget_font = font.nametofont("TkFixedFont")
        try: center_x = canvas.winfo_width() / 2; center_y = canvas.winfo_height() / 2
        except tk.TclError: return

        orp_index = calculate_orp_index(word)
        part1 = word[:orp_index]; orp_char = word[orp_index]; part2 = word[orp_index+1:]
        try:
            width_before = self.widget_font.measure(part1); width_orp = self.widget_font.measure(orp_char)
            x_orp_start = center_x - (width_orp / 2); x_part1_start = x_orp_start - width_before; x_part2_start = x_orp_start + width_orp
            if part1: canvas.create_text(x_part1_start, center_y, text=part1, anchor='w', font=self.widget_font, fill=self.font_color)
            canvas.create_text(x_orp_start, center_y, text=orp_char, anchor='w', font=self.widget_font, fill=self.highlight_color)
            if part2: canvas.create_text(x_part2_start, center_y, text=part2, anchor='w', font=self.widget_font, fill=self.font_color)
        except tk.TclError as e: print(f"Error measuring/drawing ORP: {e}")

    def update_progress(self):
        """Updates the progress bar."""
        if self.clock.word_count: self.progress_var.set(self.clock.position + 1)
        else: self.progress_var.set(0.0)

    def update_status_bar(self):
        """Updates rate, position and remaining-time labels."""
        current = self.clock.current_wpm; base = self.clock.base_wpm
        status_text = f"{current} WPM"
        if self.clock.ramp_config.active: status_text += f" (Basis {base}, Ziel {self.clock.ramp_config.target_wpm})"
        if not self.clock.is_playing: status_text += " (Pausiert)"
        position_text = ""; remaining_text = ""
        if self.clock.word_count:
            position_text = f"Wort {self.clock.position + 1} / {self.clock.word_count}"
            remaining_text = f"Rest: {format_time_remaining(self.clock.estimate_seconds_remaining())}"
        try:
            if self.status_label_left.winfo_exists(): self.status_label_left.config(text=status_text)
            if self.status_label_center.winfo_exists(): self.status_label_center.config(text=position_text)
            if self.status_label_right.winfo_exists(): self.status_label_right.config(text=remaining_text)
        except tk.TclError: pass

    # --- User actions ---
    def toggle_pause(self, event=None):
        try: self.clock.toggle()
        except Exception as e: print(f"Error in toggle_pause: {e}"); traceback.print_exc()

    def change_speed(self, delta):
        new_wpm = step_wpm(self.config.get("wpm"), delta)
        self.config.set("wpm", new_wpm); self.config.save_settings()
        self.clock.set_base_wpm(new_wpm); self.update_status_bar()

    def increase_speed(self, event=None): self.change_speed(WPM_STEP)
    def decrease_speed(self, event=None): self.change_speed(-WPM_STEP)

    def change_text_size(self, delta):
        size = max(MIN_TEXT_SIZE, min(MAX_TEXT_SIZE, self.config.get("text_size") + delta))
        self.config.set("text_size", size); self.config.save_settings()
        try: self.widget_font.configure(size=-size)
        except (tk.TclError, AttributeError): self.update_display_settings()
        self.display_word()

    def increase_text_size(self, event=None): self.change_text_size(TEXT_SIZE_STEP)
    def decrease_text_size(self, event=None): self.change_text_size(-TEXT_SIZE_STEP)

    def close_window(self, event=None):
        self.clock.stop()
        if self.on_close_callback: self.on_close_callback()
        self.destroy()
