"""Procedure declarations for tasks and bookmarks."""
from api.rpc import RpcContext, RpcRouter
from schemas.bookmark import (
    BookmarkByIdInput,
    BookmarkCreate,
    BookmarkListInput,
    BookmarkRecord,
    BookmarkUpdate,
)
from schemas.task import TaskByIdInput, TaskCreate, TaskRecord, TaskUpdate

rpc = RpcRouter()


# Tasks

@rpc.query("allTasks")
async def all_tasks(ctx: RpcContext, _data: None) -> list[TaskRecord]:
    return await ctx.domain.tasks.get_all_tasks(ctx.token)


@rpc.query("taskById", TaskByIdInput)
async def task_by_id(ctx: RpcContext, data: TaskByIdInput) -> TaskRecord | None:
    return await ctx.domain.tasks.get_task_by_id(ctx.token, data.id)


@rpc.mutation("createTask", TaskCreate)
async def create_task(ctx: RpcContext, data: TaskCreate) -> None:
    await ctx.domain.tasks.create_task(ctx.token, data)


@rpc.mutation("updateTask", TaskUpdate)
async def update_task(ctx: RpcContext, data: TaskUpdate) -> None:
    await ctx.domain.tasks.update_task(ctx.token, data.id, data.to_patch())


@rpc.mutation("deleteTask", TaskByIdInput)
async def delete_task(ctx: RpcContext, data: TaskByIdInput) -> None:
    await ctx.domain.tasks.delete_task(ctx.token, data.id)


# Bookmarks

@rpc.query("allBookmarks", BookmarkListInput)
async def all_bookmarks(ctx: RpcContext, data: BookmarkListInput) -> list[BookmarkRecord]:
    return await ctx.domain.bookmarks.get_all_bookmarks(
        ctx.token, tag=data.tag, query=data.query,
    )


@rpc.query("bookmarkById", BookmarkByIdInput)
async def bookmark_by_id(ctx: RpcContext, data: BookmarkByIdInput) -> BookmarkRecord | None:
    return await ctx.domain.bookmarks.get_bookmark_by_id(ctx.token, data.id)


@rpc.mutation("createBookmark", BookmarkCreate)
async def create_bookmark(ctx: RpcContext, data: BookmarkCreate) -> None:
    await ctx.domain.bookmarks.create_bookmark(ctx.token, data)


@rpc.mutation("updateBookmark", BookmarkUpdate)
async def update_bookmark(ctx: RpcContext, data: BookmarkUpdate) -> None:
    await ctx.domain.bookmarks.update_bookmark(ctx.token, data)


@rpc.mutation("deleteBookmark", BookmarkByIdInput)
async def delete_bookmark(ctx: RpcContext, data: BookmarkByIdInput) -> None:
    await ctx.domain.bookmarks.delete_bookmark(ctx.token, data.id)
