# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk, messagebox, filedialog
import threading
import time
import os
import sys
import traceback # For detailed error messages

# --- Dependency Imports ---
try: from pynput import keyboard; HAS_PYNPUT = True
except ImportError: HAS_PYNPUT = False; print("Warning: 'pynput' not found. Global hotkey disabled.")
try: import pyperclip; HAS_PYPERCLIP = True
except ImportError: HAS_PYPERCLIP = False; print("Warning: 'pyperclip' not found.")
try: import pystray; from PIL import Image; HAS_PYSTRAY = True
except ImportError: HAS_PYSTRAY = False # Pillow check in utils

# --- Local Module Imports ---
from config import ConfigManager
from utils import create_default_icon, resource_path, DEFAULT_ICON_NAME, HAS_PILLOW
from reading_window import ReadingWindow
from settings_window import SettingsWindow
from text_dialog import TextDialog, extract_text, normalize_text


# --- Main Application Class ---
class SpeedReaderApp:
    def __init__(self, root):
        self.root = root
        self.config = ConfigManager()
        self.text = normalize_text(self.config.get("initial_text"))
        self.hide_main_window_flag = HAS_PYSTRAY and HAS_PILLOW and self.config.get("hide_main_window")
        self.hotkey_listener = None; self.listener_thread = None
        self.reading_window_instance = None; self.settings_window_instance = None
        self.tray_icon = None; self.tray_thread = None
        self.is_shutting_down = False # Flag to prevent double quit
        self.status_label = None

        if self.hide_main_window_flag:
            print("Hiding main window."); self.root.withdraw()
        else:
            print("Main window visible."); self.root.title("Speed Reader"); self.root.geometry("380x160"); self.root.protocol("WM_DELETE_WINDOW", self.quit_app)
            menu_bar = tk.Menu(root); root.config(menu=menu_bar)
            file_menu = tk.Menu(menu_bar, tearoff=0); menu_bar.add_cascade(label="Datei", menu=file_menu)
            file_menu.add_command(label="Text eingeben...", command=self.open_text_dialog)
            file_menu.add_command(label="Datei lesen...", command=self.read_from_file)
            cb_state = "normal" if HAS_PYPERCLIP else "disabled"; file_menu.add_command(label="Aus Zwischenablage lesen", command=self.read_from_clipboard, state=cb_state)
            file_menu.add_separator(); file_menu.add_command(label="Beenden", command=self.quit_app)
            settings_menu = tk.Menu(menu_bar, tearoff=0); menu_bar.add_cascade(label="Optionen", menu=settings_menu)
            settings_menu.add_command(label="Einstellungen...", command=self.open_settings)
            ttk.Button(root, text="Lesen starten", command=lambda: self._initiate_reading(self.text)).pack(pady=(20, 0))
            self.status_label = ttk.Label(root, text="Initialisiere...", padding=10, anchor="center"); self.status_label.pack(pady=10, fill="x", expand=True)

        if HAS_PYNPUT: self.start_hotkey_listener()

        if HAS_PYSTRAY and HAS_PILLOW:
            self.setup_tray_icon()
            if self.tray_icon: self.tray_thread = threading.Thread(target=self.run_tray_icon, daemon=True); self.tray_thread.start()
        else: print("Tray icon disabled: pystray or Pillow missing.")

        self.update_status_label()

    def update_status_label(self, message=None):
        # Updates status label only if it exists and window is valid
        if not self.status_label: return
        try:
            if not self.status_label.winfo_exists(): return
            if message: display_text = message
            else:
                listener_active = self.listener_thread is not None and self.listener_thread.is_alive()
                status = "Aktiv" if listener_active else "Inaktiv"
                if not HAS_PYNPUT: status = "pynput fehlt"
                display_text = f"Hotkey: {self.config.get('hotkey')} ({status})"
            self.status_label.config(text=display_text)
        except tk.TclError: pass

    # --- Tray ---
    def setup_tray_icon(self):
        """Creates the pystray Icon object and its menu."""
        try:
            icon_path = resource_path(DEFAULT_ICON_NAME)
            icon_image = Image.open(icon_path) if os.path.exists(icon_path) else create_default_icon()
            if not icon_image: print("Error: Tray icon image not found or created."); self.tray_icon = None; return
            tray_menu = pystray.Menu(
                pystray.MenuItem('Lesen aus Zwischenablage', self.on_tray_action(self.read_from_clipboard), enabled=HAS_PYPERCLIP),
                pystray.MenuItem('Text eingeben...', self.on_tray_action(self.open_text_dialog)),
                pystray.MenuItem('Datei lesen...', self.on_tray_action(self.read_from_file)),
                pystray.MenuItem('Einstellungen...', self.on_tray_action(self.open_settings)),
                pystray.MenuItem('Beenden', self.on_tray_quit))
            self.tray_icon = pystray.Icon("SpeedReader", icon=icon_image, title="Speed Reader", menu=tray_menu)
            print("System tray icon configured.")
        except Exception as e: print(f"Error setting up tray icon: {e}"); traceback.print_exc(); self.tray_icon = None

    def run_tray_icon(self):
        """Starts the pystray event loop (blocking). Runs in its own thread."""
        print("Starting pystray icon loop...")
        try: self.tray_icon.run()
        except Exception as e: print(f"Error running pystray icon: {e}")
        finally: print("Pystray icon loop finished.")

    def on_tray_action(self, action):
        """Wraps an app action so the tray thread hands it to the Tk thread."""
        def callback(icon=None, item=None):
            print(f"Tray action: {action.__name__}")
            self.root.after(0, action)
        return callback

    def on_tray_quit(self, icon=None, item=None):
        print("Tray action: Quit")
        if self.tray_icon: self.tray_icon.stop()
        self.root.after(0, self.quit_app)

    # --- Hotkey Listener Methods ---
    def start_hotkey_listener(self):
        """Starts the global hotkey listener in a separate thread."""
        self.stop_hotkey_listener(); hotkey_str = self.config.get("hotkey")
        if not hotkey_str: self.update_status_label("Hotkey nicht konfiguriert"); return
        print(f"Attempting to register hotkey: {hotkey_str}")

        def on_activate():
            print(f"Hotkey '{hotkey_str}' activated!")
            self.root.after(0, self.read_from_clipboard)

        def listener_thread_func():
            try:
                self.hotkey_listener = keyboard.GlobalHotKeys({hotkey_str: on_activate})
                print(f"Hotkey listener starting with: {hotkey_str}"); self.hotkey_listener.run()
            except Exception as e:
                error_msg = f"Fehler beim Registrieren des Hotkeys '{hotkey_str}':\n{e}"; print(f"Error in listener thread: {error_msg}"); traceback.print_exc()
                self.root.after(0, lambda: messagebox.showerror("Hotkey Fehler", error_msg))
            finally:
                print("Hotkey listener thread finished."); self.hotkey_listener = None
                self.root.after(0, self.update_status_label)

        self.listener_thread = threading.Thread(target=listener_thread_func, daemon=True); self.listener_thread.start()
        time.sleep(0.2); self.update_status_label()

    def stop_hotkey_listener(self):
        """Stops the global hotkey listener thread if it exists."""
        listener = self.hotkey_listener
        if listener:
            print("Stopping hotkey listener...")
            try: listener.stop()
            except Exception as e: print(f"Error stopping hotkey listener: {e}")
            self.hotkey_listener = None
        thread = self.listener_thread
        if thread and thread.is_alive(): thread.join(timeout=0.5)
        if thread and thread.is_alive(): print("Warning: Listener thread did not stop.")
        self.listener_thread = None

    # --- Core Application Logic Methods ---
    def open_settings(self):
        """Opens the settings window, or raises it if already open."""
        if self.settings_window_instance and self.settings_window_instance.winfo_exists(): self.settings_window_instance.lift(); self.settings_window_instance.focus_set(); return
        print("Opening settings window...")
        def settings_closed_callback():
            print("Settings window closed."); self.settings_window_instance = None
            if HAS_PYNPUT: self.start_hotkey_listener()
            if self.reading_window_instance and self.reading_window_instance.winfo_exists(): print("Applying settings to reading window..."); self.reading_window_instance.update_display_settings()
            self.update_status_label()
        word_count = 0
        if self.reading_window_instance and self.reading_window_instance.winfo_exists(): word_count = self.reading_window_instance.clock.words_remaining
        try:
            if self.root.state() == 'withdrawn': self.root.deiconify(); self.root.update_idletasks()
            self.settings_window_instance = SettingsWindow(self.root, self.config, settings_closed_callback, word_count=word_count)
            self.settings_window_instance.lift(); self.settings_window_instance.focus_force()
        except Exception as e: print("!!! Error creating/showing SettingsWindow !!!"); traceback.print_exc(); messagebox.showerror("Fenster Fehler", f"Einstellungen konnten nicht angezeigt werden:\n{e}"); self.settings_window_instance = None
        finally:
            if self.hide_main_window_flag: self.root.withdraw()

    def open_text_dialog(self):
        """Opens the paste/type dialog with the current text as draft."""
        TextDialog(self.root, self.text, self._apply_dialog_text)

    def _apply_dialog_text(self, text):
        """An empty draft clears the open reader, which then waits paused with no words."""
        reader_open = self.reading_window_instance and self.reading_window_instance.winfo_exists()
        if not text and reader_open:
            print("Clearing text in reading window."); self.text = text
            self.reading_window_instance.start_reading(text); return
        self._initiate_reading(text)

    def _initiate_reading(self, text):
        """Loads the text into the reading window, creating it if needed."""
        if not text: messagebox.showwarning("Kein Text", "Kein Text zum Lesen bereitgestellt."); return
        self.text = text
        try:
            if not (self.reading_window_instance and self.reading_window_instance.winfo_exists()):
                print("Opening reading window...")
                self.reading_window_instance = ReadingWindow(self.root, self.config, on_close_callback=self._reading_window_closed)
            self.reading_window_instance.deiconify(); self.reading_window_instance.lift()
            self.reading_window_instance.start_reading(text)
        except Exception as e: print("!!! Error creating/starting ReadingWindow !!!"); traceback.print_exc(); messagebox.showerror("Fenster Fehler", f"Lesefenster konnte nicht gestartet werden:\n{e}"); self.reading_window_instance = None

    def _reading_window_closed(self):
        print("Reading window closed."); self.reading_window_instance = None

    def read_from_clipboard(self):
        """Reads text from the system clipboard and starts reading."""
        if not HAS_PYPERCLIP: messagebox.showerror("Fehler", "'pyperclip' fehlt."); return
        print("Reading from clipboard...")
        try: text = normalize_text(pyperclip.paste())
        except pyperclip.PyperclipException as e:
            error_msg = f"Fehler beim Clipboard-Zugriff:\n{e}"; print(error_msg); messagebox.showerror("Fehler", error_msg); return
        if text: self._initiate_reading(text)
        else: messagebox.showinfo("Zwischenablage leer", "Kein Text in Zwischenablage.")

    def read_from_file(self):
        """Opens file dialog, reads text from txt, docx, pdf and starts reading."""
        supported_filetypes = [("Unterstützte Dateien", "*.txt *.docx *.pdf"), ("Textdateien", "*.txt"), ("Word-Dokumente", "*.docx"), ("PDF-Dateien", "*.pdf"), ("Alle Dateien", "*.*")]
        filepath = filedialog.askopenfilename(title="Datei öffnen", filetypes=supported_filetypes)
        if not filepath: print("File selection cancelled."); return
        print(f"Reading from file: {filepath}")
        try: text = extract_text(filepath)
        except (OSError, UnicodeError) as e:
            error_msg = f"Datei konnte nicht gelesen werden:\n{filepath}\n\nFehler: {e}"; print(error_msg); messagebox.showerror("Fehler Dateizugriff", error_msg); return
        if text is not None: self._initiate_reading(normalize_text(text))

    def quit_app(self):
        """Cleans up resources and closes the application."""
        if self.is_shutting_down: return
        self.is_shutting_down = True
        print("Quit requested. Cleaning up...")
        self.stop_hotkey_listener()
        if self.tray_icon: print("Stopping tray icon..."); self.tray_icon.stop()
        if self.tray_thread and self.tray_thread.is_alive(): self.tray_thread.join(timeout=0.5)
        if self.reading_window_instance and self.reading_window_instance.winfo_exists():
            try: self.reading_window_instance.close_window()
            except tk.TclError: pass
        try:
            if self.root.winfo_exists(): self.root.destroy(); print("Tkinter root destroyed.")
        except tk.TclError as e: print(f"TclError destroying root: {e}")
        print("Application cleanup finished. Exiting.")


# --- Application Entry Point ---
def run():
    lock_file_path = os.path.join(os.getenv('TEMP', '/tmp'), 'speedreader_instance.lock')
    lock_file = None
    try: lock_file = os.open(lock_file_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError:
        print("Another instance might be running (lock file exists). Exiting.")
        root_check = tk.Tk(); root_check.withdraw(); messagebox.showerror("SpeedReader", "Eine andere Instanz von SpeedReader läuft bereits."); root_check.destroy(); sys.exit(1)
    except OSError as e: print(f"Error creating lock file: {e}")

    print("Starting Speed Reader Application...")
    app = None
    root = tk.Tk()
    try:
        app = SpeedReaderApp(root)
        root.mainloop()
    except KeyboardInterrupt:
        print("\nKeyboardInterrupt. Shutting down...")
    except Exception:
        print("\nUnhandled exception during initialization or main loop:"); traceback.print_exc()
    finally:
        if app is not None: app.quit_app()
        else:
            try: root.destroy()
            except tk.TclError: pass
        if lock_file is not None:
            try: os.close(lock_file); os.remove(lock_file_path); print("Lock file removed.")
            except OSError as e_lock: print(f"Error removing lock file: {e_lock}")
    print("Application exited.")

if __name__ == "__main__":
    run()
