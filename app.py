import logging

from flask import Flask

from handlers.api_handler import api_bp
from utils.config import load_config


def create_app(config=None):
    """
    创建 Flask 应用。config 为已解析的配置字典，缺省时读取 config.yaml。
    """
    if config is None:
        config = load_config()

    app = Flask(__name__)
    app.config['VIRT_BRIDGE'] = config

    # 配置日志，以便在控制台看到信息
    level = str(config.get('log_level', 'INFO')).upper()
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)

    # 注册 API 蓝图，并添加 /api 前缀
    app.register_blueprint(api_bp, url_prefix='/api')
    return app


if __name__ == '__main__':
    # 在生产环境中，应使用 Gunicorn 或 uWSGI 等 WSGI 服务器
    create_app().run(host='0.0.0.0', port=5500)
