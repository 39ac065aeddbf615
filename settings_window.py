# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk, font, colorchooser, messagebox
import traceback

try:
    from pynput import keyboard
    HAS_PYNPUT_SETTINGS = True
except ImportError:
    HAS_PYNPUT_SETTINGS = False

from pacing import (RampConfig, RampState, MIN_WPM, MAX_WPM, clamp_wpm, ramp_target,
                    estimate_seconds_remaining)
from config import MIN_TEXT_SIZE, MAX_TEXT_SIZE, MIN_RAMP_SECONDS, MAX_RAMP_SECONDS
from utils import format_time_remaining


class SettingsWindow(tk.Toplevel):
    """
    Settings window: speed, auto ramp, appearance, hotkey.

    `word_count` is the length of the text currently loaded in the reader;
    it feeds the reading-time preview next to the ramp settings.
    """
    def __init__(self, parent, config_manager, on_close_callback, word_count=0):
        super().__init__(parent)
        self.config = config_manager
        self.on_close_callback = on_close_callback
        self.word_count = word_count
        self.title("Einstellungen")
        self.resizable(False, False)
        self.protocol("WM_DELETE_WINDOW", self.on_close)
        self.settings_vars = {}

        # --- Styling ---
        style = ttk.Style(self)
        try: style.theme_use('clam')
        except tk.TclError: print("Hinweis: 'clam' ttk-Theme nicht verfügbar."); style.theme_use('default')
        style.configure("TLabelframe", padding=10)

        self.main_frame = ttk.Frame(self, padding="15"); self.main_frame.pack(expand=True, fill="both")
        self._populate_settings_frame()
        self._update_font_preview(); self._update_ramp_preview()
        self.focus_set(); self.grab_set()

    def _populate_settings_frame(self):
        # --- Speed Section ---
        wpm_frame = ttk.LabelFrame(self.main_frame, text="Geschwindigkeit", padding="15"); wpm_frame.pack(fill="x", pady=(0, 15))
        self.settings_vars["wpm"] = tk.IntVar(value=self.config.get("wpm"))
        ttk.Label(wpm_frame, text="WPM:").grid(row=0, column=0, sticky="w", padx=(0, 5), pady=5)
        ttk.Scale(wpm_frame, from_=MIN_WPM, to=MAX_WPM, orient="horizontal", variable=self.settings_vars["wpm"], command=lambda v: self.settings_vars["wpm"].set(int(float(v)))).grid(row=0, column=1, sticky="ew", padx=5, pady=5)
        ttk.Spinbox(wpm_frame, from_=MIN_WPM, to=MAX_WPM, increment=50, textvariable=self.settings_vars["wpm"], width=6).grid(row=0, column=2, sticky="w", padx=5, pady=5)
        wpm_frame.columnconfigure(1, weight=1)

        # --- Auto Ramp Section ---
        ramp_frame = ttk.LabelFrame(self.main_frame, text="Automatisch beschleunigen", padding="15"); ramp_frame.pack(fill="x", pady=(0, 15))
        self.settings_vars["auto_ramp_enabled"] = tk.BooleanVar(value=self.config.get("auto_ramp_enabled"))
        self.settings_vars["ramp_target_wpm"] = tk.IntVar(value=self.config.get("ramp_target_wpm"))
        self.settings_vars["ramp_seconds"] = tk.IntVar(value=self.config.get("ramp_seconds"))
        ttk.Checkbutton(ramp_frame, text="Auto-Ramp aktivieren", variable=self.settings_vars["auto_ramp_enabled"]).grid(row=0, column=0, columnspan=3, sticky="w", pady=(0, 5))
        ttk.Label(ramp_frame, text="Ziel:").grid(row=1, column=0, sticky="w", pady=5)
        ttk.Spinbox(ramp_frame, from_=MIN_WPM, to=MAX_WPM, increment=50, textvariable=self.settings_vars["ramp_target_wpm"], width=6).grid(row=1, column=1, sticky="w", padx=5, pady=5)
        ttk.Label(ramp_frame, text="WPM").grid(row=1, column=2, sticky="w", pady=5)
        ttk.Label(ramp_frame, text="Über:").grid(row=2, column=0, sticky="w", pady=5)
        ttk.Spinbox(ramp_frame, from_=MIN_RAMP_SECONDS, to=MAX_RAMP_SECONDS, increment=5, textvariable=self.settings_vars["ramp_seconds"], width=6).grid(row=2, column=1, sticky="w", padx=5, pady=5)
        ttk.Label(ramp_frame, text="Sekunden").grid(row=2, column=2, sticky="w", pady=5)
        self.ramp_preview_label = ttk.Label(ramp_frame, text="", foreground="grey"); self.ramp_preview_label.grid(row=3, column=0, columnspan=3, sticky="w", pady=(10, 0))
        for key in ("wpm", "auto_ramp_enabled", "ramp_target_wpm", "ramp_seconds"):
            self.settings_vars[key].trace_add("write", self._update_ramp_preview)

        # --- Appearance Section ---
        font_frame = ttk.LabelFrame(self.main_frame, text="Erscheinungsbild", padding="15"); font_frame.pack(fill="x", pady=(0, 15))
        self.settings_vars["dark_mode"] = tk.BooleanVar(value=self.config.get("dark_mode"))
        ttk.Checkbutton(font_frame, text="Dark Mode (Text- und Hintergrundfarbe werden ignoriert)", variable=self.settings_vars["dark_mode"]).grid(row=0, column=0, columnspan=3, sticky="w", pady=(0, 5))
        for key in ("font_family", "font_color", "highlight_color", "background_color"):
            self.settings_vars[key] = tk.StringVar(value=self.config.get(key))
        self.settings_vars["text_size"] = tk.IntVar(value=self.config.get("text_size"))
        ttk.Label(font_frame, text="Schriftart:").grid(row=1, column=0, sticky="w", pady=5)
        font_combo = ttk.Combobox(font_frame, textvariable=self.settings_vars["font_family"], values=sorted(font.families()), width=25, state="readonly"); font_combo.grid(row=1, column=1, columnspan=2, sticky="ew", padx=5, pady=5); font_combo.bind("<<ComboboxSelected>>", self._update_font_preview)
        ttk.Label(font_frame, text="Größe:").grid(row=2, column=0, sticky="w", pady=5)
        ttk.Spinbox(font_frame, from_=MIN_TEXT_SIZE, to=MAX_TEXT_SIZE, increment=2, textvariable=self.settings_vars["text_size"], width=5, command=self._update_font_preview).grid(row=2, column=1, sticky="w", padx=5, pady=5)
        self.color_previews = {}
        for row, (key, label) in enumerate((("font_color", "Textfarbe:"), ("background_color", "Hintergrund:"), ("highlight_color", "ORP Farbe:")), start=3):
            ttk.Label(font_frame, text=label).grid(row=row, column=0, sticky="w", pady=5)
            ttk.Button(font_frame, text="Wählen...", command=lambda k=key: self._choose_color(k)).grid(row=row, column=1, sticky="w", padx=5, pady=5)
            self.color_previews[key] = tk.Label(font_frame, text=" ", relief="sunken", borderwidth=1, bg=self.config.get(key), width=3); self.color_previews[key].grid(row=row, column=2, sticky="w", pady=5, padx=5)
        self.font_preview_label = tk.Label(font_frame, text="Wort 123", relief="groove", borderwidth=1, padx=10, pady=5); self.font_preview_label.grid(row=6, column=0, columnspan=3, sticky="ew", pady=(10, 5))
        font_frame.columnconfigure(1, weight=1)

        # --- Hotkey / Window Section ---
        hotkey_frame = ttk.LabelFrame(self.main_frame, text="Tastenkürzel & Fenster", padding="15"); hotkey_frame.pack(fill="x", pady=(0, 15))
        self.settings_vars["hotkey"] = tk.StringVar(value=self.config.get("hotkey"))
        ttk.Label(hotkey_frame, text="Lesen aus Zwischenablage:").grid(row=0, column=0, sticky="w", pady=5)
        hotkey_state = "normal" if HAS_PYNPUT_SETTINGS else "disabled"
        ttk.Entry(hotkey_frame, textvariable=self.settings_vars["hotkey"], width=25, state=hotkey_state).grid(row=0, column=1, sticky="ew", padx=5, pady=5)
        ttk.Label(hotkey_frame, text="Format: <ctrl>+<alt>+r", foreground="grey").grid(row=1, column=1, sticky="w", padx=5)
        self.settings_vars["hide_main_window"] = tk.BooleanVar(value=self.config.get("hide_main_window"))
        ttk.Checkbutton(hotkey_frame, text="Hauptfenster verbergen (nur Tray-Icon)", variable=self.settings_vars["hide_main_window"]).grid(row=2, column=0, columnspan=2, sticky="w", pady=(10, 2))
        hotkey_frame.columnconfigure(1, weight=1)

        # --- Bottom Buttons ---
        button_frame = ttk.Frame(self, padding="10 10 10 10"); button_frame.pack(fill="x", side="bottom")
        ttk.Button(button_frame, text="Abbrechen", command=self.on_close).pack(side="right", padx=(0, 5))
        ttk.Button(button_frame, text="Speichern & Schließen", command=self.save_and_close).pack(side="right", padx=(0, 5))

    # --- Callback Methods ---
    def _read_int(self, key):
        try: return int(self.settings_vars[key].get())
        except (tk.TclError, ValueError): return None

    def _update_ramp_preview(self, *args):
        """Shows how long the loaded text would take with the settings as entered."""
        wpm = self._read_int("wpm"); target = self._read_int("ramp_target_wpm"); seconds = self._read_int("ramp_seconds")
        if wpm is None or target is None or seconds is None:
            text = "Ungültige Eingabe"
        else:
            ramp = RampConfig(enabled=self.settings_vars["auto_ramp_enabled"].get(), target_wpm=target, duration_seconds=seconds)
            text = ""
            if ramp.active and clamp_wpm(target) < clamp_wpm(wpm):
                text = f"Ziel unter Start: bleibt bei {ramp_target(wpm, target)} WPM. "
            if self.word_count:
                estimate = estimate_seconds_remaining(self.word_count, wpm, wpm, ramp, False, RampState(wpm), 0.0)
                text += f"Lesezeit für {self.word_count} Wörter: {format_time_remaining(estimate)}"
        try:
            if self.ramp_preview_label.winfo_exists(): self.ramp_preview_label.config(text=text)
        except tk.TclError: pass

    def _choose_color(self, setting_key):
        current_color = self.settings_vars[setting_key].get()
        try: color_code = colorchooser.askcolor(title=f"Farbe wählen für '{setting_key}'", initialcolor=current_color, parent=self)
        except tk.TclError as e: messagebox.showerror("Farbwahlfehler", f"Fehler: {e}", parent=self); return
        if color_code and color_code[1]:
            hex_color = color_code[1]; self.settings_vars[setting_key].set(hex_color)
            try: self.color_previews[setting_key].config(bg=hex_color)
            except tk.TclError: pass
            self._update_font_preview()

    def _update_font_preview(self, *args):
        """Updates the font preview label based on current settings."""
        size = self._read_int("text_size")
        try:
            if size is None:
                self.font_preview_label.config(text="Ungültige Größe", font=font.nametofont("TkDefaultFont"), fg="red", bg="white"); return
            preview_font = font.Font(family=self.settings_vars["font_family"].get(), size=-max(MIN_TEXT_SIZE, size))
            self.font_preview_label.config(text="Wort 123", font=preview_font, fg=self.settings_vars["font_color"].get(), bg=self.settings_vars["background_color"].get())
        except tk.TclError:
            try: self.font_preview_label.config(text="Ungültige Schriftart", font=font.nametofont("TkDefaultFont"), fg="red", bg="white")
            except tk.TclError: pass

    # --- Save and Close Methods ---
    def _validate_hotkey(self, hotkey):
        if not HAS_PYNPUT_SETTINGS: return True
        try: keyboard.HotKey.parse(hotkey); return True
        except ValueError: return False

    def save_and_close(self):
        """Validates the inputs, stores them in the config and saves it."""
        try:
            ranges = {"wpm": (MIN_WPM, MAX_WPM, "WPM"), "ramp_target_wpm": (MIN_WPM, MAX_WPM, "Ziel-WPM"),
                      "ramp_seconds": (MIN_RAMP_SECONDS, MAX_RAMP_SECONDS, "Ramp-Dauer"), "text_size": (MIN_TEXT_SIZE, MAX_TEXT_SIZE, "Schriftgröße")}
            for key, (low, high, label) in ranges.items():
                value = self._read_int(key)
                if value is None: messagebox.showerror("Ungültiger Wert", f"{label}: keine Zahl.", parent=self); return
                # Out-of-range numbers are pulled to the nearest bound
                self.config.set(key, max(low, min(high, value)))
            hotkey = self.settings_vars["hotkey"].get().strip()
            if not self._validate_hotkey(hotkey): messagebox.showerror("Ungültiger Wert", f"Tastenkürzel '{hotkey}' ist ungültig.", parent=self); return
            self.config.set("hotkey", hotkey)
            for key in ("auto_ramp_enabled", "dark_mode", "hide_main_window", "font_family", "font_color", "highlight_color", "background_color"):
                self.config.set(key, self.settings_vars[key].get())
            self.config.save_settings()
            self.on_close()
        except Exception as e:
            messagebox.showerror("Fehler beim Speichern", f"Einstellungen konnten nicht gespeichert werden:\n{e}", parent=self)
            print(traceback.format_exc())

    def on_close(self):
        """Handles the closing of the settings window."""
        try: self.grab_release()
        except tk.TclError: pass
        self.destroy()
        if self.on_close_callback:
            try: self.on_close_callback()
            except Exception as e: print(f"Error in settings window close callback: {e}"); print(traceback.format_exc())
