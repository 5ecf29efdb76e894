import os
import uvicorn

def main():
    from config import settings

    # ログ出力先・レベルは get_logger が環境変数から読むため、main をインポートする前に設定する
    settings.setup_environment()
    os.makedirs(settings.USER_DATA_DIR, exist_ok=True)

    from main import app

    port = int(os.environ.get("MEDIALIB_PORT", settings.MEDIALIB_PORT))
    print(f"Medialib listening on http://127.0.0.1:{port}")
    print(f"Database: {settings.DB_PATH}")
    print(f"Uploads:  {settings.UPLOAD_DIR}")

    # DuckDB はプロセス単位でファイルを排他するためワーカーは1つ
    uvicorn.run(app, host="127.0.0.1", port=port, reload=False, workers=1)

if __name__ == "__main__":
    main()
