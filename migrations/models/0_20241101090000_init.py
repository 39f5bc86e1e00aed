from tortoise import BaseDBAsyncClient

RUN_IN_TRANSACTION = True


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "users" (
    "id" UUID NOT NULL PRIMARY KEY,
    "email" VARCHAR(255) NOT NULL UNIQUE,
    "password_hash" VARCHAR(255),
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE IF NOT EXISTS "tasks" (
    "id" UUID NOT NULL PRIMARY KEY,
    "title" VARCHAR(255) NOT NULL,
    "description" TEXT,
    "due_date" TIMESTAMPTZ,
    "priority" VARCHAR(6) NOT NULL DEFAULT 'Medium',
    "status" VARCHAR(11) NOT NULL DEFAULT 'Pending',
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "user_id" UUID NOT NULL REFERENCES "users" ("id") ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS "idx_task_user" ON "tasks" ("user_id");
CREATE INDEX IF NOT EXISTS "idx_task_created" ON "tasks" ("created_at");
CREATE INDEX IF NOT EXISTS "idx_task_due_date" ON "tasks" ("due_date");
CREATE INDEX IF NOT EXISTS "idx_task_status" ON "tasks" ("status");
COMMENT ON COLUMN "tasks"."due_date" IS 'Срок выполнения';
COMMENT ON COLUMN "tasks"."priority" IS 'Приоритет задачи';
COMMENT ON COLUMN "tasks"."status" IS 'Статус выполнения';
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        DROP TABLE IF EXISTS "tasks";
        DROP TABLE IF EXISTS "users";"""
