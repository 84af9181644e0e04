"""Rust modules shared across the extraction tests."""

from __future__ import annotations

import textwrap


def rust(source: str) -> str:
    """Dedent an inline Rust snippet."""
    return textwrap.dedent(source).lstrip("\n")


BASIC = rust(
    """
    use serde::{Deserialize, Serialize};

    /// Greets the user.
    #[tauri::command]
    fn greet(name: String) -> String {
        format!("Hello, {}! You've been greeted from Rust!", name)
    }

    /// Adds two numbers.
    #[tauri::command]
    fn add(a: i32, b: i32) -> i32 {
        a + b
    }

    fn helper(id: u32) -> String {
        format!("User with id: {}", id)
    }
    """
)

STRUCTS = rust(
    """
    // Import serde traits.
    use serde::{Deserialize, Serialize};

    /// User record.
    #[derive(Serialize, Deserialize)]
    pub struct User {
        /// Unique identifier.
        pub id: u32,

        /// Display name.
        pub name: String,

        /// Optional e-mail address.
        pub email: Option<String>,
    }

    /// Product record.
    #[derive(Debug, Serialize, Deserialize)]
    pub struct Product {
        pub product_id: String,
        pub price: f64,
        pub quantity: u32,
    }

    /// Fetch a user.
    ///
    /// Returns dummy data.
    #[tauri::command]
    pub fn get_user_data(id: u32) -> User {
        // dummy
        User {
            id,
            name: "Test User".to_string(),
            email: None,
        }
    }

    #[tauri::command]
    pub fn get_product_data(product_id: String) -> Product {
        Product {
            product_id,
            price: 99.99,
            quantity: 1,
        }
    }
    """
)

ENUMS = rust(
    """
    use serde::{Deserialize, Serialize};

    /**
     * Represents different types of messages.
     */
    #[derive(Debug, Serialize, Deserialize)]
    pub enum Message {
        /// Quit the application.
        Quit,
        /// Move to a new position.
        Move { x: i32, y: i32 },
        /// Write a message.
        Write(String),
        /// Change the color.
        ChangeColor(i32, i32, i32),
    }

    #[tauri::command]
    pub fn process_message(msg: Message) -> String {
        match msg {
            Message::Quit => "Quit".to_string(),
            Message::Move { x, y } => format!("Move to ({}, {})", x, y),
            Message::Write(text) => format!("Write: {}", text),
            Message::ChangeColor(r, g, b) => format!("Change color to ({}, {}, {})", r, g, b),
        }
    }
    """
)

NESTED = rust(
    """
    use serde::{Deserialize, Serialize};

    #[derive(Debug, Serialize, Deserialize)]
    pub struct Data {
        pub append: Append,
        pub extras: Vec<Option<AppendEx>>,
    }

    #[derive(Debug, Serialize, Deserialize)]
    pub struct Append {
        pub num: i32,
        pub append_ex: AppendEx,
    }

    #[derive(Debug, Serialize)]
    pub struct AppendEx {
        pub num: i32,
    }

    #[tauri::command]
    pub fn process(data: Data) -> String {
        String::new()
    }

    #[tauri::command]
    pub fn store(items: Vec<AppendEx>, count: u32) {}

    #[tauri::command]
    pub fn latest() -> Option<Data> {
        None
    }
    """
)

APP_HANDLE = rust(
    """
    #[tauri::command]
    async fn test_app_handle(webview_window: tauri::AppHandle) -> Result<String, String> {
        Ok(webview_window.label().to_string())
    }

    #[tauri::command]
    async fn test_app_handle2(webview_window: tauri::AppHandle, name: &str) -> Result<String, String> {
        Ok(webview_window.label().to_string() + name)
    }

    use tauri::AppHandle as MyWindow;

    #[tauri::command]
    async fn test_app_handle3(webview_window: MyWindow, name: &str) -> Result<String, String> {
        Ok(webview_window.label().to_string() + name)
    }

    use tauri::AppHandle;

    #[tauri::command]
    async fn test_app_handle4(webview_window: AppHandle, name: &str) -> Result<String, String> {
        Ok(webview_window.label().to_string() + name)
    }
    """
)

STATE = rust(
    """
    struct MyState(String);

    #[tauri::command]
    fn test_state(state: tauri::State<MyState>) {
        assert_eq!(state.0 == "some state value", true);
    }

    use tauri::State as MyWindow;

    #[tauri::command]
    fn test_state3(state: MyWindow<MyState>, name: &str) {
        assert_eq!(state.0 == "some state value", true);
    }
    """
)

WINDOW = rust(
    """
    use tauri::Window;

    #[tauri::command]
    async fn my_custom_command(window: Window) -> Result<(), String> {
        println!("Called from {}", window.label());
        Err("No result".into())
    }
    """
)

RESPONSE = rust(
    """
    #[tauri::command]
    fn read_file1() -> tauri::ipc::Response {
        let data = std::fs::read("path").unwrap();
        tauri::ipc::Response::new(data)
    }

    use tauri::ipc::Response;

    #[tauri::command]
    fn read_file2() -> Response {
        let data = std::fs::read("path").unwrap();
        tauri::ipc::Response::new(data)
    }
    """
)

EVENT_GLOBAL = rust(
    """
    use tauri::Window;

    #[tauri::command]
    fn app_handle_command(app: tauri::AppHandle) -> Result<String, String> {
        use tauri::Emitter;
        let _ = app.emit("global", "msg-global").unwrap();
        let identifier = &app.config().identifier;
        Ok(identifier.to_string())
    }
    """
)

EVENT_WINDOW = rust(
    """
    #[derive(Clone, serde::Serialize)]
    pub struct EventPayload {
        pub message: String,
    }

    #[tauri::command]
    fn event_test_command(app: tauri::AppHandle) {
        use tauri::Emitter;
        app.emit_to(
            "main",
            "window-event",
            EventPayload {
                message: "payload-struct".to_string(),
            },
        )
        .unwrap();
    }
    """
)

EVENT_WINDOW_MANY = rust(
    """
    use serde::{Deserialize, Serialize};
    use tauri::{AppHandle, Manager, WebviewWindow};

    #[derive(Clone, serde::Serialize, serde::Deserialize)]
    pub struct MainPayload {
        pub message: String,
        pub value: u32,
    }

    #[derive(Clone, serde::Serialize, serde::Deserialize)]
    pub struct SubPayload {
        pub data: String,
    }

    #[tauri::command]
    fn emit_main_event(app: AppHandle, payload: MainPayload) {
        app.emit_to("main", "main_event", MainPayload { message: "test".to_string(), value: 1 }).unwrap();
    }

    #[tauri::command]
    fn emit_sub_event(window: WebviewWindow, payload: SubPayload) {
        window.emit("sub_event", SubPayload { data: "test".to_string() }).unwrap();
    }

    #[tauri::command]
    fn emit_another_main_event(app: AppHandle) {
        app.emit_to("main", "another_main_event", "simple string").unwrap();
    }
    """
)

MALFORMED = rust(
    """
    #[tauri::command]
    fn broken(name: String -> String {
        name
    }
    """
)


__all__ = [
    "APP_HANDLE",
    "BASIC",
    "ENUMS",
    "EVENT_GLOBAL",
    "EVENT_WINDOW",
    "EVENT_WINDOW_MANY",
    "MALFORMED",
    "NESTED",
    "RESPONSE",
    "STATE",
    "STRUCTS",
    "WINDOW",
    "rust",
]
